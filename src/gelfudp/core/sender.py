"""GELF sender composing compression, chunking and UDP transmission."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import List

from .chunking import IdSource, split_payload
from .compression import Compression, compress
from .transport import UDPTransmitter

__all__ = ["DEFAULT_MAX_CHUNK_SIZE", "DEFAULT_PORT", "GELFSender", "TransportConfig"]

DEFAULT_PORT = 12201
DEFAULT_MAX_CHUNK_SIZE = 1420


@dataclass(frozen=True, slots=True)
class TransportConfig:
    host: str = "localhost"
    port: int = DEFAULT_PORT
    compression: Compression = Compression.NONE
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    timeout: float | None = None


class GELFSender:
    """Encode byte payloads as GELF datagrams and send them over UDP.

    ``write`` is synchronous: the payload is compressed, split into chunks
    when it exceeds ``max_chunk_size`` and every datagram is sent before the
    call returns. Writes are serialized with a lock so a sender can be
    shared between threads.
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        *,
        transmitter: UDPTransmitter | None = None,
        id_source: IdSource = os.urandom,
    ) -> None:
        self.config = config or TransportConfig()
        self.transmitter = transmitter or UDPTransmitter(
            self.config.host, self.config.port, timeout=self.config.timeout
        )
        self._id_source = id_source
        self._lock = threading.Lock()

    def encode(self, payload: bytes) -> List[bytes]:
        """Return the datagrams ``payload`` would be sent as."""

        compressed = compress(payload, self.config.compression)
        return split_payload(compressed, self.config.max_chunk_size, id_source=self._id_source)

    def write(self, payload: bytes) -> int:
        """Send ``payload`` and return its length.

        Raises a :class:`~gelfudp.core.errors.GELFError` subclass when any
        stage fails; the caller then has to assume nothing was delivered.
        """

        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise TypeError(f"payload must be bytes-like, not {type(payload).__name__}")
        data = bytes(payload)
        with self._lock:
            datagrams = self.encode(data)
            self.transmitter.send_all(datagrams)
        return len(data)

    def sync(self) -> None:
        """Nothing is buffered; provided for writer interfaces expecting it."""

    def close(self) -> None:
        """No resources are held between writes."""

    def __enter__(self) -> "GELFSender":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()
