"""GELF UDP handler implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from ..core.sender import GELFSender
from ..formatters.gelf import GELFFormatter

__all__ = ["GELFHandlerConfig", "GELFUDPHandler", "build_gelf_udp_handler"]


@dataclass(slots=True)
class GELFHandlerConfig:
    level: str | int = "INFO"
    source: str | None = None
    facility: str | None = None
    static_fields: Dict[str, Any] = field(default_factory=dict)
    include_extras: bool = True


class GELFUDPHandler(logging.Handler):
    """Send each record as one GELF message through a :class:`GELFSender`."""

    def __init__(self, sender: GELFSender, *, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.sender = sender
        self.setFormatter(GELFFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = self.format(record).encode("utf-8")
            self.sender.write(payload)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.sender.sync()

    def close(self) -> None:
        try:
            self.sender.close()
        finally:
            super().close()


def build_gelf_udp_handler(sender: GELFSender, config: GELFHandlerConfig | None = None) -> GELFUDPHandler:
    cfg = config or GELFHandlerConfig()
    handler = GELFUDPHandler(sender)
    handler.setFormatter(
        GELFFormatter(
            source=cfg.source,
            facility=cfg.facility,
            static_fields=cfg.static_fields,
            include_extras=cfg.include_extras,
        )
    )
    return handler
