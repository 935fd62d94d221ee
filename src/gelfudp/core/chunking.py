"""Chunked GELF framing."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Callable, List

from .errors import ChunkOverflowError, MessageIDGenerationError

__all__ = [
    "CHUNK_MAGIC",
    "CHUNK_HEADER_SIZE",
    "MAX_CHUNK_COUNT",
    "MESSAGE_ID_SIZE",
    "Chunk",
    "chunk_count",
    "generate_message_id",
    "is_chunked",
    "parse_chunk",
    "split_payload",
]

CHUNK_MAGIC = b"\x1e\x0f"
MESSAGE_ID_SIZE = 8
CHUNK_HEADER_SIZE = 12
# sequence index and count are single bytes
MAX_CHUNK_COUNT = 255

_HEADER = struct.Struct("!2s8sBB")

IdSource = Callable[[int], bytes]


@dataclass(frozen=True, slots=True)
class Chunk:
    """One framed slice of a chunked message."""

    message_id: bytes
    index: int
    count: int
    data: bytes

    def header(self) -> bytes:
        return _HEADER.pack(CHUNK_MAGIC, self.message_id, self.index, self.count)

    def to_bytes(self) -> bytes:
        return self.header() + self.data


def chunk_count(length: int, max_chunk_size: int) -> int:
    """Return how many chunks ``length`` bytes need."""

    return -(-length // max_chunk_size)


def generate_message_id(source: IdSource = os.urandom) -> bytes:
    """Return a fresh message id drawn from ``source``."""

    try:
        message_id = source(MESSAGE_ID_SIZE)
    except (OSError, NotImplementedError) as exc:
        raise MessageIDGenerationError(f"Random source failed: {exc}") from exc
    if not isinstance(message_id, (bytes, bytearray)) or len(message_id) != MESSAGE_ID_SIZE:
        raise MessageIDGenerationError(f"Random source did not return {MESSAGE_ID_SIZE} bytes")
    return bytes(message_id)


def split_payload(payload: bytes, max_chunk_size: int, *, id_source: IdSource = os.urandom) -> List[bytes]:
    """Split an encoded payload into the datagrams to send, in order.

    A payload that fits in ``max_chunk_size`` is returned unchanged as the
    only datagram. Larger payloads are cut into ``max_chunk_size`` slices,
    each prefixed with a 12 byte header sharing one message id.
    """

    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be positive")

    length = len(payload)
    if length <= max_chunk_size:
        return [bytes(payload)]

    count = chunk_count(length, max_chunk_size)
    if count > MAX_CHUNK_COUNT:
        raise ChunkOverflowError(count, MAX_CHUNK_COUNT)

    message_id = generate_message_id(id_source)
    datagrams: List[bytes] = []
    for index in range(count):
        start = index * max_chunk_size
        chunk = Chunk(
            message_id=message_id,
            index=index,
            count=count,
            data=bytes(payload[start : start + max_chunk_size]),
        )
        datagrams.append(chunk.to_bytes())
    return datagrams


def is_chunked(datagram: bytes) -> bool:
    return len(datagram) >= CHUNK_HEADER_SIZE and datagram[:2] == CHUNK_MAGIC


def parse_chunk(datagram: bytes) -> Chunk:
    """Decode a chunk datagram back into a :class:`Chunk`."""

    if not is_chunked(datagram):
        raise ValueError("Datagram does not carry a chunked GELF header")
    _, message_id, index, count = _HEADER.unpack_from(datagram)
    return Chunk(message_id=message_id, index=index, count=count, data=bytes(datagram[CHUNK_HEADER_SIZE:]))
