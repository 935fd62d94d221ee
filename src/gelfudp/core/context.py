"""Context-aware logging adapter."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, MutableMapping, Tuple

__all__ = ["ContextAdapter", "inject_context"]


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that attaches persistent fields to every record.

    The fields end up in the record's ``extra`` mapping, so the GELF
    formatter sends them as additional fields. Values given through
    ``extra=`` on a single call win over the persistent ones.
    """

    def __init__(self, logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> None:
        super().__init__(logger, {})
        self._context: Dict[str, Any] = dict(base_context or {})

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def set_context(self, ctx: Mapping[str, Any]) -> None:
        self._context = dict(ctx)

    def add_context(self, **kwargs: Any) -> None:
        self._context.update(kwargs)

    def remove_context(self, *keys: str) -> None:
        for key in keys:
            self._context.pop(key, None)

    def clear_context(self) -> None:
        self._context.clear()

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        merged: Dict[str, Any] = dict(self._context)
        call_extra = kwargs.get("extra")
        if isinstance(call_extra, Mapping):
            merged.update(call_extra)
        kwargs["extra"] = merged
        return msg, kwargs


def inject_context(logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> ContextAdapter:
    """Return a :class:`ContextAdapter` wrapping ``logger``."""

    return ContextAdapter(logger, base_context=base_context)
