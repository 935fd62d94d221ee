"""UDP transmission of encoded GELF datagrams."""

from __future__ import annotations

import socket
from typing import Any, Sequence, Tuple

from .errors import AddressResolutionError, TransmissionError

__all__ = ["MAX_UDP_PAYLOAD", "UDPTransmitter"]

# 65535 minus the IPv4 and UDP headers
MAX_UDP_PAYLOAD = 65507


class UDPTransmitter:
    """Send datagrams to a fixed ``host:port`` destination.

    The destination is resolved and a socket acquired for every call; nothing
    is pooled between calls.
    """

    def __init__(self, host: str, port: int, *, timeout: float | None = None) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    @property
    def destination(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def resolve(self) -> Tuple[int, Any]:
        """Return ``(family, sockaddr)`` for the destination."""

        try:
            infos = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_DGRAM)
        except (OSError, UnicodeError) as exc:
            raise AddressResolutionError(f"Cannot resolve {self.destination}: {exc}") from exc
        if not infos:
            raise AddressResolutionError(f"No UDP address found for {self.destination}")
        family, _, _, _, sockaddr = infos[0]
        return family, sockaddr

    def send(self, datagram: bytes) -> int:
        """Send one datagram as a single UDP packet."""

        return self.send_all([datagram])

    def send_all(self, datagrams: Sequence[bytes]) -> int:
        """Send ``datagrams`` in order, one UDP packet each.

        Stops at the first failure; datagrams already sent stay sent.
        """

        family, sockaddr = self.resolve()
        try:
            sock = self._open_socket(family)
        except (OSError, ValueError) as exc:
            raise TransmissionError(f"Cannot open UDP socket for {self.destination}: {exc}") from exc

        total = 0
        with sock:
            for index, datagram in enumerate(datagrams):
                try:
                    written = sock.sendto(datagram, sockaddr)
                except OSError as exc:
                    raise TransmissionError(
                        f"Sending datagram {index} to {self.destination} failed: {exc}", sent=index
                    ) from exc
                if written != len(datagram):
                    raise TransmissionError(
                        f"Short write for datagram {index} to {self.destination}: {written} of {len(datagram)} bytes",
                        sent=index,
                    )
                total += written
        return total

    def _open_socket(self, family: int) -> socket.socket:
        sock = socket.socket(family, socket.SOCK_DGRAM)
        if self.timeout is not None:
            try:
                sock.settimeout(self.timeout)
            except (OSError, ValueError):
                sock.close()
                raise
        return sock
