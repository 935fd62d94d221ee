"""Payload compression for GELF datagrams."""

from __future__ import annotations

import gzip
import io
import zlib
from enum import Enum
from typing import Callable, Dict

from .errors import CompressionError

__all__ = ["Compression", "compress"]


class Compression(str, Enum):
    """Compression applied to a payload before it is chunked."""

    NONE = "none"
    GZIP = "gzip"
    ZLIB = "zlib"

    @classmethod
    def parse(cls, value: "Compression | str") -> "Compression":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown compression '{value}', expected one of: {choices}") from None


Compressor = Callable[[bytes], bytes]


def _compress_none(payload: bytes) -> bytes:
    return bytes(payload)


def _compress_gzip(payload: bytes) -> bytes:
    buffer = io.BytesIO()
    # closing the GzipFile writes the trailer
    with gzip.GzipFile(fileobj=buffer, mode="wb") as stream:
        stream.write(payload)
    return buffer.getvalue()


def _compress_zlib(payload: bytes) -> bytes:
    compressor = zlib.compressobj()
    return compressor.compress(payload) + compressor.flush(zlib.Z_FINISH)


COMPRESSORS: Dict[Compression, Compressor] = {
    Compression.NONE: _compress_none,
    Compression.GZIP: _compress_gzip,
    Compression.ZLIB: _compress_zlib,
}


def compress(payload: bytes, mode: Compression | str = Compression.NONE) -> bytes:
    """Compress ``payload`` according to ``mode``.

    Any failure while writing or finalizing the stream is reported as
    :class:`CompressionError` and no partial output is returned.
    """

    resolved = Compression.parse(mode)
    compressor = COMPRESSORS[resolved]
    try:
        return compressor(payload)
    except (OSError, zlib.error, ValueError) as exc:
        raise CompressionError(f"{resolved.value} compression failed: {exc}") from exc
