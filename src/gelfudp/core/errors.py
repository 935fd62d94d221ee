"""Exceptions raised by the GELF encode/send pipeline."""

from __future__ import annotations

__all__ = [
    "GELFError",
    "CompressionError",
    "MessageIDGenerationError",
    "ChunkOverflowError",
    "AddressResolutionError",
    "TransmissionError",
    "ConfigurationError",
]


class GELFError(Exception):
    """Base class for every failure of a GELF write."""


class CompressionError(GELFError):
    """Raised when the payload cannot be compressed or the stream finalized."""


class MessageIDGenerationError(GELFError):
    """Raised when the random source cannot provide a chunk message id."""


class ChunkOverflowError(GELFError):
    """Raised when a payload needs more chunks than the header can count."""

    def __init__(self, chunk_count: int, limit: int) -> None:
        super().__init__(f"Payload needs {chunk_count} chunks, at most {limit} are allowed")
        self.chunk_count = chunk_count
        self.limit = limit


class AddressResolutionError(GELFError):
    """Raised when the destination cannot be resolved to a UDP endpoint."""


class TransmissionError(GELFError):
    """Raised when sending a datagram fails.

    ``sent`` holds the number of datagrams of the same write that already
    left the socket; they are not retracted.
    """

    def __init__(self, message: str, *, sent: int = 0) -> None:
        super().__init__(message)
        self.sent = sent


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""
