"""Minimal structured event logging.

Emits one line per event made of key=value pairs (or a JSON object when
VAULTGEN_LOG_JSON is set) with a timestamp, level and logger name:

    from vaultgen.logging_utils import get_logger
    log = get_logger("vaultgen.dungeon")
    log.info(event="generation_complete", seed=42, rooms=17)

Level threshold comes from VAULTGEN_LOG_LEVEL (debug/info/warn/error) and is
read on every call so tests can flip it with monkeypatch. Errors go to stderr.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def _threshold() -> int:
    return LEVELS.get(os.getenv("VAULTGEN_LOG_LEVEL", "info").lower(), 20)


def _json_mode() -> bool:
    return os.getenv("VAULTGEN_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def format_event(level: str, **fields) -> str:
    fields = {k: v for k, v in fields.items() if v is not None}
    if _json_mode():
        rec = dict(fields, level=level, ts=int(time.time()))
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class EventLogger:
    def __init__(self, name: str):
        self.name = name

    def _emit(self, level: str, **fields):
        if LEVELS[level] < _threshold():
            return
        fields.setdefault("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(format_event(level, **fields), file=stream)

    def debug(self, **fields):
        self._emit("debug", **fields)

    def info(self, **fields):
        self._emit("info", **fields)

    def warn(self, **fields):
        self._emit("warn", **fields)

    def error(self, **fields):
        self._emit("error", **fields)


_LOGGERS: dict[str, EventLogger] = {}


def get_logger(name: str) -> EventLogger:
    if name not in _LOGGERS:
        _LOGGERS[name] = EventLogger(name)
    return _LOGGERS[name]


log = get_logger("vaultgen")
