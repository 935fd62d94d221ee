"""Manager responsible for the sender and handler lifecycle."""

from __future__ import annotations

import logging
from typing import Set

from ..config.schema import GELFConfig, enabled_loggers
from ..handlers.gelf_udp import GELFUDPHandler, build_gelf_udp_handler
from .context import ContextAdapter, inject_context
from .levels import ensure_level
from .sender import GELFSender
from .validation import validate_configuration


class LogManager:
    """Central coordinator for gelfudp configuration."""

    def __init__(self) -> None:
        self._config: GELFConfig | None = None
        self._sender: GELFSender | None = None
        self._handler: GELFUDPHandler | None = None
        self._configured_loggers: Set[str] = set()

    @property
    def config(self) -> GELFConfig | None:
        return self._config

    @property
    def sender(self) -> GELFSender | None:
        return self._sender

    @property
    def handler(self) -> GELFUDPHandler | None:
        return self._handler

    # ------------------------------------------------------------------
    def configure(self, config: GELFConfig) -> None:
        """Apply the supplied configuration."""

        validate_configuration(config)
        self._teardown()

        self._config = config
        self._sender = GELFSender(config.transport)
        handler = build_gelf_udp_handler(self._sender, config.handler)
        handler.setLevel(ensure_level(config.handler.level))
        self._handler = handler

        for spec in enabled_loggers(config):
            logger = logging.getLogger() if spec.name == "root" else logging.getLogger(spec.name)
            logger.setLevel(ensure_level(spec.level))
            logger.addHandler(handler)
            if spec.name != "root":
                logger.propagate = spec.propagate
            self._configured_loggers.add(spec.name)

    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Detach the handler and release the sender."""

        self._teardown()
        self._config = None

    # ------------------------------------------------------------------
    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_context_logger(self, name: str, **fields: object) -> ContextAdapter:
        return inject_context(self.get_logger(name), base_context=fields)

    # ------------------------------------------------------------------
    def _teardown(self) -> None:
        handler = self._handler
        if handler is not None:
            for logger_name in self._configured_loggers:
                logger = logging.getLogger() if logger_name == "root" else logging.getLogger(logger_name)
                logger.removeHandler(handler)
            handler.close()
        self._handler = None
        self._sender = None
        self._configured_loggers.clear()


GLOBAL_MANAGER = LogManager()
