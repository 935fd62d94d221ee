from __future__ import annotations

import gzip
import json
import socket
import threading
import zlib
from typing import List, Sequence

import pytest

from gelfudp.core.chunking import CHUNK_HEADER_SIZE, CHUNK_MAGIC, parse_chunk
from gelfudp.core.compression import Compression
from gelfudp.core.errors import (
    AddressResolutionError,
    ChunkOverflowError,
    CompressionError,
    MessageIDGenerationError,
    TransmissionError,
)
from gelfudp.core.sender import GELFSender, TransportConfig
from gelfudp.core.transport import UDPTransmitter

SMALL_MESSAGE = b'{"host":"h","short_message":"Test Message","version":"1.1"}'
MESSAGE = b'{"host":"host.example.org","short_message":"Test Message","timestamp":"","version":"1.1"}'


class RecordingTransmitter(UDPTransmitter):
    def __init__(self) -> None:
        super().__init__("127.0.0.1", 9)
        self.sent: List[bytes] = []

    def send_all(self, datagrams: Sequence[bytes]) -> int:
        self.sent.extend(datagrams)
        return sum(len(d) for d in datagrams)


class FlakySocket:
    def __init__(self, fail_at: int) -> None:
        self.fail_at = fail_at
        self.sent: List[bytes] = []
        self.closed = False

    def sendto(self, data: bytes, address: object) -> int:
        if len(self.sent) == self.fail_at:
            raise OSError("network is unreachable")
        self.sent.append(data)
        return len(data)

    def __enter__(self) -> "FlakySocket":
        return self

    def __exit__(self, *exc: object) -> None:
        self.closed = True


class FlakyTransmitter(UDPTransmitter):
    def __init__(self, fail_at: int) -> None:
        super().__init__("127.0.0.1", 9)
        self.socket = FlakySocket(fail_at)

    def _open_socket(self, family: int) -> socket.socket:
        return self.socket  # type: ignore[return-value]


def _receive(listener: socket.socket, count: int) -> List[bytes]:
    return [listener.recvfrom(65535)[0] for _ in range(count)]


def test_uncompressed_message_is_sent_as_is(udp_listener: socket.socket, listener_port: int) -> None:
    sender = GELFSender(TransportConfig(host="127.0.0.1", port=listener_port, max_chunk_size=1024))

    written = sender.write(SMALL_MESSAGE)

    (packet,) = _receive(udp_listener, 1)
    assert written == len(SMALL_MESSAGE)
    assert packet == SMALL_MESSAGE
    assert json.loads(packet)["short_message"] == "Test Message"


def test_gzip_message_decompresses_to_payload(udp_listener: socket.socket, listener_port: int) -> None:
    config = TransportConfig(host="127.0.0.1", port=listener_port, compression=Compression.GZIP)
    GELFSender(config).write(SMALL_MESSAGE)

    (packet,) = _receive(udp_listener, 1)
    assert gzip.decompress(packet) == SMALL_MESSAGE


def test_zlib_message_decompresses_to_payload(udp_listener: socket.socket, listener_port: int) -> None:
    config = TransportConfig(host="127.0.0.1", port=listener_port, compression=Compression.ZLIB)
    GELFSender(config).write(MESSAGE)

    (packet,) = _receive(udp_listener, 1)
    assert zlib.decompress(packet) == MESSAGE


def test_oversized_message_is_chunked(udp_listener: socket.socket, listener_port: int) -> None:
    assert 80 < len(MESSAGE) <= 160
    sender = GELFSender(TransportConfig(host="127.0.0.1", port=listener_port, max_chunk_size=80))

    sender.write(MESSAGE)

    first, second = _receive(udp_listener, 2)
    assert first[:2] == CHUNK_MAGIC == second[:2]
    assert list(first[:2]) == [30, 15]
    assert first[2:10] == second[2:10]
    assert (first[10], first[11]) == (0, 2)
    assert (second[10], second[11]) == (1, 2)
    assert first[CHUNK_HEADER_SIZE:] + second[CHUNK_HEADER_SIZE:] == MESSAGE
    assert json.loads(first[CHUNK_HEADER_SIZE:] + second[CHUNK_HEADER_SIZE:])["host"] == "host.example.org"


def test_compressed_chunks_reassemble(udp_listener: socket.socket, listener_port: int) -> None:
    payload = json.dumps({"short_message": "big", "_blob": bytes(range(256)).hex() * 8}).encode()
    config = TransportConfig(host="127.0.0.1", port=listener_port, compression=Compression.GZIP, max_chunk_size=64)
    sender = GELFSender(config)
    expected = sender.encode(payload)

    sender.write(payload)

    chunks = [parse_chunk(packet) for packet in _receive(udp_listener, len(expected))]
    assert sorted(chunk.index for chunk in chunks) == list(range(len(expected)))
    assert {chunk.count for chunk in chunks} == {len(expected)}
    assert len({chunk.message_id for chunk in chunks}) == 1
    ordered = sorted(chunks, key=lambda chunk: chunk.index)
    assert gzip.decompress(b"".join(chunk.data for chunk in ordered)) == payload


def test_datagrams_leave_in_sequence_order() -> None:
    transmitter = RecordingTransmitter()
    sender = GELFSender(TransportConfig(max_chunk_size=10), transmitter=transmitter)

    sender.write(b"0123456789" * 5)

    assert [parse_chunk(d).index for d in transmitter.sent] == [0, 1, 2, 3, 4]


def test_write_rejects_text() -> None:
    sender = GELFSender(transmitter=RecordingTransmitter())
    with pytest.raises(TypeError):
        sender.write("not bytes")  # type: ignore[arg-type]


def test_compression_failure_sends_nothing(monkeypatch: pytest.MonkeyPatch) -> None:
    from gelfudp.core import compression

    def broken(payload: bytes) -> bytes:
        raise OSError("disk full")

    monkeypatch.setitem(compression.COMPRESSORS, Compression.GZIP, broken)
    transmitter = RecordingTransmitter()
    sender = GELFSender(TransportConfig(compression=Compression.GZIP), transmitter=transmitter)

    with pytest.raises(CompressionError):
        sender.write(MESSAGE)
    assert transmitter.sent == []


def test_message_id_failure_sends_nothing() -> None:
    def source(size: int) -> bytes:
        raise NotImplementedError("no randomness")

    transmitter = RecordingTransmitter()
    sender = GELFSender(TransportConfig(max_chunk_size=10), transmitter=transmitter, id_source=source)

    with pytest.raises(MessageIDGenerationError):
        sender.write(MESSAGE)
    assert transmitter.sent == []


def test_chunk_overflow_sends_nothing() -> None:
    transmitter = RecordingTransmitter()
    sender = GELFSender(TransportConfig(max_chunk_size=1), transmitter=transmitter)

    with pytest.raises(ChunkOverflowError):
        sender.write(b"x" * 256)
    assert transmitter.sent == []


def test_resolution_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*args: object, **kwargs: object) -> object:
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", fail)
    sender = GELFSender(TransportConfig(host="graylog.invalid", port=12201))

    with pytest.raises(AddressResolutionError, match="graylog.invalid:12201"):
        sender.write(MESSAGE)


def test_failure_mid_message_keeps_sent_chunks() -> None:
    transmitter = FlakyTransmitter(fail_at=2)
    sender = GELFSender(TransportConfig(max_chunk_size=20), transmitter=transmitter)

    with pytest.raises(TransmissionError) as excinfo:
        sender.write(MESSAGE)

    assert excinfo.value.sent == 2
    assert len(transmitter.socket.sent) == 2
    assert transmitter.socket.closed
    assert parse_chunk(transmitter.socket.sent[0]).count == 5


def test_concurrent_writes_keep_messages_intact(udp_listener: socket.socket, listener_port: int) -> None:
    sender = GELFSender(TransportConfig(host="127.0.0.1", port=listener_port, max_chunk_size=32))
    payloads = [json.dumps({"short_message": f"worker {n}", "pad": "x" * 40}).encode() for n in range(4)]
    threads = [threading.Thread(target=sender.write, args=(payload,)) for payload in payloads]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    total = sum(len(sender.encode(payload)) for payload in payloads)
    messages: dict[bytes, dict[int, bytes]] = {}
    for packet in _receive(udp_listener, total):
        chunk = parse_chunk(packet)
        messages.setdefault(chunk.message_id, {})[chunk.index] = chunk.data

    rebuilt = sorted(b"".join(parts[i] for i in sorted(parts)) for parts in messages.values())
    assert rebuilt == sorted(payloads)


def test_destination_descriptor() -> None:
    assert UDPTransmitter("graylog.local", 12201).destination == "graylog.local:12201"
    assert UDPTransmitter("::1", 12201).destination == "[::1]:12201"


def test_timeout_is_applied_to_socket() -> None:
    sock = UDPTransmitter("127.0.0.1", 9, timeout=0.25)._open_socket(socket.AF_INET)
    with sock:
        assert sock.gettimeout() == 0.25


def test_no_timeout_keeps_blocking_socket() -> None:
    sock = UDPTransmitter("127.0.0.1", 9)._open_socket(socket.AF_INET)
    with sock:
        assert sock.gettimeout() is None


def test_rejected_timeout_closes_socket(monkeypatch: pytest.MonkeyPatch) -> None:
    opened: List[socket.socket] = []
    real_socket = socket.socket

    class TrackingSocket(real_socket):  # type: ignore[misc, valid-type]
        def __init__(self, *args: object, **kwargs: object) -> None:
            super().__init__(*args, **kwargs)  # type: ignore[arg-type]
            opened.append(self)

    monkeypatch.setattr(socket, "socket", TrackingSocket)
    sender = GELFSender(TransportConfig(host="127.0.0.1", port=9, timeout=-1))

    with pytest.raises(TransmissionError, match="Cannot open UDP socket"):
        sender.write(b"x")
    assert len(opened) == 1
    assert opened[0].fileno() == -1


def test_single_datagram_send(udp_listener: socket.socket, listener_port: int) -> None:
    transmitter = UDPTransmitter("127.0.0.1", listener_port, timeout=1.0)

    assert transmitter.send(b"hello") == 5
    packet, _ = udp_listener.recvfrom(65535)
    assert packet == b"hello"
