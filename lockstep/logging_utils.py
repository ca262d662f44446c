"""Event logging for topology passes.

Every generation step reports what it did as one line of ``key=value`` fields
(or a JSON object), prefixed with the level and a unix timestamp. Lines go to
stderr so ``run.py analyze --json`` keeps stdout clean for the result document.

    from lockstep.logging_utils import get_logger
    _log = get_logger("topology")
    _log.info(event="topology_built", sectors=5, connectors=4, seed=(1, 1))
    # level=info ts=1760000000 event=topology_built sectors=5 connectors=4 seed=1-1 logger=topology

Grid cells (pairs of ints) print as ``x-y``, the same notation the topology
dump uses. Fields set to None are left out.

Environment:
    LOCKSTEP_LOG_LEVEL  debug | info | warn | error (default: info)
    LOCKSTEP_LOG_JSON   1/true/yes/on to emit JSON lines

Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("LOCKSTEP_LOG_LEVEL", "info").lower(), LEVELS["info"])
JSON_MODE = os.getenv("LOCKSTEP_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _is_cell(value) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, int) for v in value)


def _kv_value(value) -> str:
    if isinstance(value, (int, float)):
        return str(value)
    if _is_cell(value):
        return f"{value[0]}-{value[1]}"
    return str(value).replace(" ", "_")


def render_event(level: str, fields: dict) -> str:
    """Turn one event into its output line."""
    ts = int(time.time())
    present = {k: v for k, v in fields.items() if v is not None}
    if JSON_MODE:
        present.update(level=level, ts=ts)
        return json.dumps(present, separators=(",", ":"), default=str)
    body = " ".join(f"{k}={_kv_value(v)}" for k, v in present.items())
    return f"level={level} ts={ts} {body}".rstrip()


class EventLogger:
    """Named emitter; ``name`` is attached to every line as ``logger``."""

    def __init__(self, name: str | None = None):
        self.name = name or "lockstep"

    def enabled_for(self, level: str) -> bool:
        return LEVELS[level] >= CURRENT_LEVEL

    def emit(self, level: str, **fields):
        if not self.enabled_for(level):
            return
        fields.setdefault("logger", self.name)
        print(render_event(level, fields), file=sys.stderr)

    def debug(self, **fields):
        self.emit("debug", **fields)

    def info(self, **fields):
        self.emit("info", **fields)

    def warn(self, **fields):
        self.emit("warn", **fields)

    def error(self, **fields):
        self.emit("error", **fields)


_loggers: dict[str, EventLogger] = {}


def get_logger(name: str) -> EventLogger:
    if name not in _loggers:
        _loggers[name] = EventLogger(name)
    return _loggers[name]


log = get_logger("lockstep")
