"""Log level helpers."""

from __future__ import annotations

import logging

__all__ = ["SYSLOG_LEVELS", "ensure_level", "get_level_by_name", "syslog_severity"]

# (minimum python level, syslog severity), highest first
SYSLOG_LEVELS = (
    (logging.CRITICAL, 2),
    (logging.ERROR, 3),
    (logging.WARNING, 4),
    (logging.INFO, 6),
)
_SYSLOG_DEBUG = 7


def syslog_severity(levelno: int) -> int:
    """Map a stdlib level number onto the syslog severity GELF expects.

    Levels between the stdlib constants round down, so a custom level 25
    is reported like ``INFO``.
    """

    for minimum, severity in SYSLOG_LEVELS:
        if levelno >= minimum:
            return severity
    return _SYSLOG_DEBUG


def get_level_by_name(name: str) -> int:
    """Resolve a logging level from a friendly name."""

    stripped = name.strip()
    if stripped.isdigit():
        return int(stripped)
    resolved = logging.getLevelName(stripped.upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def ensure_level(value: int | str) -> int:
    """Normalize user supplied level values."""

    if isinstance(value, int):
        return value
    return get_level_by_name(value)
