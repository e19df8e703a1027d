"""
Loguru setup for bots.

Every record carries two extra fields shown as columns: ``bot`` (bound by
each Bot on its logger) and ``event`` (the event the current task is
processing, e.g. ``message:42``). Records logged outside a bot or an
event show ``-``.

Environment:
- BOTPIPE_LOG_LEVEL=DEBUG   minimum level (default INFO)
- BOTPIPE_LOG_JSON=1        JSON lines on stderr instead of text
- BOTPIPE_LOG_FILE=/path    also write text lines to a rotating file
"""

import contextvars
import json
import os
import sys
from pathlib import Path
from typing import Any, TextIO

from loguru import logger

_event_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("event_id", default="")

# Columns every sink expects in record["extra"]
CONTEXT_FIELDS = ("bot", "event_id")

TEXT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> "
    "<magenta>[{extra[bot]}]</magenta> <cyan>{extra[event_id]}</cyan> "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} [{extra[bot]}] {extra[event_id]} "
    "{name}:{line} {message}"
)


def get_event_id() -> str:
    return _event_id_ctx.get() or "-"


def set_event_id(event_id: str | int | None) -> contextvars.Token[str]:
    """Set the event id for the current task. Return token for reset."""
    return _event_id_ctx.set(str(event_id) if event_id is not None else "")


def reset_event_id(token: contextvars.Token[str]) -> None:
    _event_id_ctx.reset(token)


def _fill_context(record: dict) -> bool:
    extra = record["extra"]
    extra.setdefault("bot", "-")
    extra.setdefault("event_id", get_event_id())
    return True


def record_to_dict(record: dict) -> dict[str, Any]:
    """Flatten a loguru record into the JSON line layout."""
    extra = record["extra"]
    data: dict[str, Any] = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "bot": extra.get("bot", "-"),
        "event": extra.get("event_id", "-"),
        "message": record["message"],
        "source": f"{record['name']}:{record['line']}",
    }
    for key, value in extra.items():
        if key in CONTEXT_FIELDS or value is None:
            continue
        data[key] = value if isinstance(value, (str, int, float, bool)) else repr(value)
    if record["exception"] is not None:
        data["exception"] = repr(record["exception"].value)
    return data


class JsonSink:
    """Loguru sink writing one JSON object per record."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def __call__(self, message) -> None:
        stream = self.stream or sys.stderr
        stream.write(json.dumps(record_to_dict(message.record), ensure_ascii=False) + "\n")
        stream.flush()


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Replace loguru's default sink. Call once at startup.

    Args:
        level: Minimum level; BOTPIPE_LOG_LEVEL or INFO when None.
        json_logs: JSON output; BOTPIPE_LOG_JSON when None.
    """
    level = (level or os.environ.get("BOTPIPE_LOG_LEVEL", "") or "INFO").strip().upper()
    if json_logs is None:
        json_logs = _env_flag("BOTPIPE_LOG_JSON")

    logger.remove()
    if json_logs:
        logger.add(JsonSink(), level=level, filter=_fill_context, format="{message}")
    else:
        logger.add(sys.stderr, level=level, filter=_fill_context, format=TEXT_FORMAT)

    log_file = os.environ.get("BOTPIPE_LOG_FILE", "").strip()
    if not log_file:
        return
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        path,
        level=level,
        filter=_fill_context,
        format=FILE_FORMAT,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )
