"""GELF 1.1 formatter."""

from __future__ import annotations

import json
import logging
import re
import socket
from typing import Any, Dict, Mapping, MutableMapping

from ..core.levels import syslog_severity

__all__ = ["GELF_VERSION", "GELFFormatter", "is_valid_field_name"]

GELF_VERSION = "1.1"
# GELF rejects an empty short_message
_EMPTY_MESSAGE = "-"

_FIELD_NAME = re.compile(r"^[\w.\-]+$")

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "asctime",
    "message",
    "taskName",
}


def is_valid_field_name(name: str) -> bool:
    """Return whether ``name`` may be sent as a GELF additional field."""

    return name != "id" and bool(_FIELD_NAME.match(name))


def _to_json_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


class GELFFormatter(logging.Formatter):
    """Render records as compact GELF JSON documents.

    Record attributes outside the stdlib set (``extra=`` values and context
    fields) become ``_``-prefixed additional fields. Nested values are sent
    as JSON strings since GELF only allows scalars.
    """

    def __init__(
        self,
        *,
        source: str | None = None,
        facility: str | None = None,
        static_fields: Mapping[str, Any] | None = None,
        include_extras: bool = True,
    ) -> None:
        super().__init__()
        self.source = source or socket.gethostname()
        self.facility = facility
        self.static_fields = dict(static_fields or {})
        self.include_extras = include_extras

    def build_payload(self, record: logging.LogRecord) -> Dict[str, Any]:
        message = record.getMessage()
        short_message = message.partition("\n")[0]
        if not short_message.strip():
            short_message = message.strip().partition("\n")[0] or _EMPTY_MESSAGE
        payload: MutableMapping[str, Any] = {
            "version": GELF_VERSION,
            "host": self.source,
            "short_message": short_message,
            "timestamp": round(record.created, 3),
            "level": syslog_severity(record.levelno),
        }

        full_message = message
        if record.exc_info:
            full_message = f"{message}\n{self.formatException(record.exc_info)}"
        elif record.exc_text:
            full_message = f"{message}\n{record.exc_text}"
        if record.stack_info:
            full_message = f"{full_message}\n{self.formatStack(record.stack_info)}"
        if full_message and full_message != short_message:
            payload["full_message"] = full_message

        payload["_logger"] = record.name
        payload["_file"] = record.pathname
        payload["_line"] = record.lineno
        payload["_function"] = record.funcName
        payload["_thread_name"] = record.threadName
        payload["_process"] = record.process
        if self.facility:
            payload["_facility"] = self.facility

        for key, value in self.static_fields.items():
            payload[f"_{key}"] = _to_json_value(value)

        if self.include_extras:
            for key, value in record.__dict__.items():
                if key in _STANDARD_ATTRS or key.startswith("_"):
                    continue
                if not is_valid_field_name(key):
                    continue
                payload[f"_{key}"] = _to_json_value(value)

        return dict(payload)

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return json.dumps(self.build_payload(record), ensure_ascii=False, separators=(",", ":"))
