"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import GELFConfig
from ..formatters.gelf import is_valid_field_name
from .chunking import CHUNK_HEADER_SIZE
from .errors import ConfigurationError
from .transport import MAX_UDP_PAYLOAD

__all__ = ["MAX_CHUNK_SIZE", "ConfigurationError", "validate_configuration"]

# a full chunk plus its header must still fit in one UDP datagram
MAX_CHUNK_SIZE = MAX_UDP_PAYLOAD - CHUNK_HEADER_SIZE


def validate_configuration(config: GELFConfig) -> None:
    """Ensure configuration values are usable."""

    transport = config.transport
    if not transport.host:
        raise ConfigurationError("transport.host must not be empty")
    if not 0 < transport.port < 65536:
        raise ConfigurationError(f"transport.port must be between 1 and 65535, got {transport.port}")
    if not 0 < transport.max_chunk_size <= MAX_CHUNK_SIZE:
        raise ConfigurationError(
            f"transport.max_chunk_size must be between 1 and {MAX_CHUNK_SIZE}, got {transport.max_chunk_size}"
        )
    # zero would switch the socket to non-blocking mode
    if transport.timeout is not None and transport.timeout <= 0:
        raise ConfigurationError(f"transport.timeout must be positive, got {transport.timeout}")

    invalid = [name for name in config.handler.static_fields if not is_valid_field_name(name)]
    if invalid:
        raise ConfigurationError(f"Invalid GELF additional field names: {', '.join(sorted(invalid))}")
