"""gelfudp public API."""

from .api import configure, get_context_logger, get_logger, get_sender, write
from .core.compression import Compression
from .core.errors import (
    AddressResolutionError,
    ChunkOverflowError,
    CompressionError,
    ConfigurationError,
    GELFError,
    MessageIDGenerationError,
    TransmissionError,
)
from .core.sender import GELFSender, TransportConfig
from .version import __version__

__all__ = [
    "configure",
    "get_logger",
    "get_context_logger",
    "get_sender",
    "write",
    "Compression",
    "GELFSender",
    "TransportConfig",
    "GELFError",
    "CompressionError",
    "MessageIDGenerationError",
    "ChunkOverflowError",
    "AddressResolutionError",
    "TransmissionError",
    "ConfigurationError",
    "__version__",
]
