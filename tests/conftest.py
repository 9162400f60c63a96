import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from levelgen import create_app  # noqa: E402
from levelgen.routes.level_api import clear_level_cache  # noqa: E402


@pytest.fixture()
def test_app(tmp_path):
    app = create_app({"TESTING": True})
    app.instance_path = str(tmp_path / "instance")
    return app


@pytest.fixture()
def client(test_app):
    clear_level_cache()
    yield test_app.test_client()
    clear_level_cache()


@pytest.fixture(autouse=True)
def _quiet_generation_logs(monkeypatch):
    """Generation logs every level at info; keep test output readable."""
    monkeypatch.setenv("LEVELGEN_LOG_LEVEL", "error")
    monkeypatch.delenv("LEVELGEN_LOG_JSON", raising=False)
    monkeypatch.delenv("LEVELGEN_DISABLE_CACHE", raising=False)
    monkeypatch.delenv("LEVELGEN_ENABLE_GENERATION_METRICS", raising=False)
