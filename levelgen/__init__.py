"""
project: levelgen
module: __init__.py
License: MIT

Flask application factory for the level generator.

Configuration is sourced from environment variables (optionally loaded from a
``.env`` file) with defaults suited to local development. The ``instance/``
directory holds runtime files such as the rotating log.
"""

import os

from dotenv import load_dotenv
from flask import Flask

__all__ = ["create_app"]


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def create_app(config: dict | None = None) -> Flask:
    """Build a Flask app serving the level API and isometric view.

    ``config`` entries override the environment-derived defaults (tests pass
    ``TESTING=True`` here).
    """
    # Load .env if present so LEVELGEN_* switches can be set without exporting them.
    load_dotenv()
    app = Flask(__name__, instance_relative_config=True)
    os.makedirs(app.instance_path, exist_ok=True)
    app.config.update(
        LEVELGEN_DISABLE_CACHE=_env_flag("LEVELGEN_DISABLE_CACHE"),
        LEVELGEN_CACHE_SIZE=int(os.getenv("LEVELGEN_CACHE_SIZE", "8")),
    )
    if config:
        app.config.update(config)

    from levelgen.routes.level_api import bp_level

    app.register_blueprint(bp_level)
    return app
