"""Minimal structured logging helper.

Emits one key=value line (or one JSON object) per event with a timestamp and
level. Generation code logs through this so runs can be grepped or parsed
without configuring the stdlib logging tree.

Usage:
    from levelgen.logging_utils import get_logger
    log = get_logger("levelgen.pipeline")
    log.info(event="level_generated", seed=42, rooms=12)

Environment:
    LEVELGEN_LOG_LEVEL  debug|info|warn|error (default info)
    LEVELGEN_LOG_JSON   1/true/yes/on for JSON lines

Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
_TRUTHY = ("1", "true", "TRUE", "yes", "on")


def current_level() -> int:
    return LEVELS.get(os.getenv("LEVELGEN_LOG_LEVEL", "info").lower(), 20)


def json_mode() -> bool:
    return os.getenv("LEVELGEN_LOG_JSON", "0") in _TRUTHY


def _format(level: str, **fields):
    if json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "levelgen"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < current_level():
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("levelgen")
