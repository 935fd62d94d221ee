from __future__ import annotations

import logging
import socket
from typing import Iterator

import pytest

import gelfudp.api as gelfudp_api
from gelfudp.core.manager import GLOBAL_MANAGER


@pytest.fixture(autouse=True)
def reset_gelfudp() -> Iterator[None]:
    yield
    GLOBAL_MANAGER.shutdown()
    gelfudp_api._CONFIGURED = False
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.WARNING)


@pytest.fixture()
def udp_listener() -> Iterator[socket.socket]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    try:
        yield sock
    finally:
        sock.close()


@pytest.fixture()
def listener_port(udp_listener: socket.socket) -> int:
    return udp_listener.getsockname()[1]
