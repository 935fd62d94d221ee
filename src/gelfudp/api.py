"""Public API surface for gelfudp."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .config.loader import load_configuration
from .core.context import ContextAdapter
from .core.manager import GLOBAL_MANAGER
from .core.sender import GELFSender

_CONFIGURED = False


def configure(overrides: Dict[str, Any] | None = None) -> None:
    """Configure gelfudp using the provided overrides."""

    global _CONFIGURED
    config = load_configuration(overrides or {})
    GLOBAL_MANAGER.configure(config)
    _CONFIGURED = True


def _ensure_configured() -> None:
    global _CONFIGURED
    if not _CONFIGURED:
        configure({})


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_logger(name)


def get_context_logger(name: str, **fields: Any) -> ContextAdapter:
    """Return a logger adapter sending ``fields`` with every record."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_context_logger(name, **fields)


def get_sender() -> GELFSender:
    """Return the sender built from the active configuration."""

    _ensure_configured()
    sender = GLOBAL_MANAGER.sender
    assert sender is not None
    return sender


def write(payload: bytes) -> int:
    """Send a ready-made GELF payload with the configured sender."""

    return get_sender().write(payload)
