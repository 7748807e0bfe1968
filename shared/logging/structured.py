"""One-line JSON log events for the help bot.

Every event carries ``ts``, ``level``, ``logger``, ``msg`` and ``trace``, plus
the static fields given to the formatter (the bot name). Catalog code attaches
its context through ``extra=``; e.g. a rejected catalog logs ``label`` and
``keyword``, the web tracer logs ``path``, ``status`` and ``ms``. Extras that
shadow ``LogRecord`` attributes are ignored.
"""

from __future__ import annotations

import contextvars
import json
import logging
import time
import uuid
from typing import Any, Dict, Mapping

__all__ = ["JsonFormatter", "get_trace_id", "set_trace_id"]

_trace_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id", default="")

_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def set_trace_id(value: str | None = None) -> str:
    """Bind a trace id to the current request or command and return it."""

    trace = value or str(uuid.uuid4())
    _trace_id_var.set(trace)
    return trace


def get_trace_id() -> str:
    return _trace_id_var.get()


def _timestamp(record: logging.LogRecord) -> str:
    stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
    return f"{stamp}.{int(record.msecs):03d}Z"


def _extra_fields(record: logging.LogRecord, taken: Mapping[str, Any]) -> Dict[str, Any]:
    """Scalars pass through; sequences (e.g. suggestion lists) become string lists."""

    fields: Dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key.startswith("_") or key in _RECORD_ATTRS or key in taken:
            continue
        if value is None or isinstance(value, (str, int, float, bool)):
            fields[key] = value
        elif isinstance(value, (list, tuple)):
            fields[key] = [str(item) for item in value]
    return fields


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def __init__(self, static: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._static = dict(static or {})

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - docstring inherited
        payload: Dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "trace": getattr(record, "trace", "") or get_trace_id(),
        }
        payload.update(self._static)
        payload.update(_extra_fields(record, payload))

        if record.exc_info:
            # Marker and command failures keep their traceback in one field.
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)
