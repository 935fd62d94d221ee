"""Configuration schema definition for gelfudp."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ..core.compression import Compression
from ..core.errors import ConfigurationError
from ..core.sender import DEFAULT_MAX_CHUNK_SIZE, DEFAULT_PORT, TransportConfig
from ..handlers.gelf_udp import GELFHandlerConfig

DEFAULT_CONFIG: Dict[str, Any] = {
    "transport": {
        "host": "localhost",
        "port": DEFAULT_PORT,
        "compression": "none",
        "max_chunk_size": DEFAULT_MAX_CHUNK_SIZE,
        "timeout": None,
    },
    "handler": {
        "level": "INFO",
        "source": None,
        "facility": None,
        "static_fields": {},
        "include_extras": True,
    },
    "logging": {
        "root": {
            "level": "INFO",
            "attach": True,
        },
        "loggers": {},
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class LoggerSpec:
    name: str
    level: str | int
    attach: bool = True
    propagate: bool = False


@dataclass(slots=True)
class GELFConfig:
    transport: TransportConfig
    handler: GELFHandlerConfig
    root_logger: LoggerSpec
    loggers: Dict[str, LoggerSpec]
    raw: Dict[str, Any] = field(repr=False)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_transport(data: Mapping[str, Any]) -> TransportConfig:
    timeout_raw = data.get("timeout")
    try:
        compression = Compression.parse(data.get("compression", "none"))
        port = int(data.get("port", DEFAULT_PORT))
        max_chunk_size = int(data.get("max_chunk_size", DEFAULT_MAX_CHUNK_SIZE))
        timeout = float(timeout_raw) if timeout_raw not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid transport setting: {exc}") from exc
    return TransportConfig(
        host=str(data.get("host", "localhost")).strip(),
        port=port,
        compression=compression,
        max_chunk_size=max_chunk_size,
        timeout=timeout,
    )


def _to_handler(data: Mapping[str, Any]) -> GELFHandlerConfig:
    static_raw = data.get("static_fields", {})
    if not isinstance(static_raw, Mapping):
        raise ConfigurationError("handler.static_fields must be a mapping")
    return GELFHandlerConfig(
        level=data.get("level", "INFO"),
        source=_optional_str(data.get("source")),
        facility=_optional_str(data.get("facility")),
        static_fields={str(key): value for key, value in static_raw.items()},
        include_extras=bool(data.get("include_extras", True)),
    )


def _to_loggers(data: Mapping[str, Any]) -> tuple[LoggerSpec, Dict[str, LoggerSpec]]:
    root_data = data.get("root", {})
    if not isinstance(root_data, Mapping):
        root_data = {}
    loggers_data = data.get("loggers", {})
    if not isinstance(loggers_data, Mapping):
        loggers_data = {}

    root_spec = LoggerSpec(
        name="root",
        level=root_data.get("level", "INFO"),
        attach=bool(root_data.get("attach", True)),
        propagate=False,
    )

    specs: Dict[str, LoggerSpec] = {}
    for name, payload in loggers_data.items():
        if not isinstance(payload, Mapping):
            continue
        specs[name] = LoggerSpec(
            name=name,
            level=payload.get("level", "INFO"),
            attach=bool(payload.get("attach", True)),
            propagate=bool(payload.get("propagate", False)),
        )
    return root_spec, specs


def build_config(data: Mapping[str, Any]) -> GELFConfig:
    transport = _to_transport(data.get("transport", {}))
    handler = _to_handler(data.get("handler", {}))
    root_logger, loggers = _to_loggers(data.get("logging", {}))
    raw_copy: Dict[str, Any] = deepcopy({k: v for k, v in data.items()})

    return GELFConfig(
        transport=transport,
        handler=handler,
        root_logger=root_logger,
        loggers=loggers,
        raw=raw_copy,
    )


def enabled_loggers(config: GELFConfig) -> List[LoggerSpec]:
    """Return the logger specs the handler should be attached to."""

    specs = [config.root_logger] if config.root_logger.attach else []
    specs.extend(spec for spec in config.loggers.values() if spec.attach)
    return specs
