import json
import logging

from levelgen.logging_utils import current_level, get_logger, json_mode
from levelgen.server import _configure_logging


def test_key_value_lines(monkeypatch, capsys):
    monkeypatch.setenv("LEVELGEN_LOG_LEVEL", "info")
    log = get_logger("levelgen.test")
    log.info(event="level_generated", seed=42, mode="marble", detail="two words", skipped=None)
    out = capsys.readouterr().out.strip()
    assert out.startswith("level=info ts=")
    assert "event=level_generated" in out
    assert "seed=42" in out
    assert "detail=two_words" in out
    assert "logger=levelgen.test" in out
    assert "skipped" not in out


def test_json_lines(monkeypatch, capsys):
    monkeypatch.setenv("LEVELGEN_LOG_LEVEL", "debug")
    monkeypatch.setenv("LEVELGEN_LOG_JSON", "1")
    assert json_mode()
    get_logger("levelgen.test").debug(event="rooms_placed", rooms=3)
    rec = json.loads(capsys.readouterr().out)
    assert rec["event"] == "rooms_placed"
    assert rec["rooms"] == 3
    assert rec["level"] == "debug"
    assert rec["logger"] == "levelgen.test"
    assert isinstance(rec["ts"], int)


def test_threshold_filters_lower_levels(monkeypatch, capsys):
    monkeypatch.setenv("LEVELGEN_LOG_LEVEL", "warn")
    assert current_level() == 30
    log = get_logger("levelgen.test")
    log.info(event="hidden")
    log.warn(event="shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "event=shown" in out


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LEVELGEN_LOG_LEVEL", "chatty")
    assert current_level() == 20


def test_errors_go_to_stderr(capsys):
    get_logger("levelgen.test").error(event="classification_gap", x=1, y=2)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=classification_gap" in captured.err


def test_loggers_are_cached():
    assert get_logger("levelgen.same") is get_logger("levelgen.same")


def test_configure_logging_is_idempotent(test_app, tmp_path):
    test_app.instance_path = str(tmp_path)
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        _configure_logging(test_app)
        path = _configure_logging(test_app)
        assert len(root.handlers) == 2
        logging.getLogger("levelgen.test").info("server ready")
        for h in root.handlers:
            h.flush()
        log_file = tmp_path / "levelgen.log"
        assert path == str(log_file)
        assert log_file.exists()
        assert "server ready" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
