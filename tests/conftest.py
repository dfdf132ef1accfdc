import random

import pytest

from drawlio_server.core.liveness import LivenessMonitor
from drawlio_server.core.state import GameSession
from drawlio_server.server import DrawlioServer

WORDS = ["apple", "sweden", "war", "cool", "tree"]


class FakeSocket:
    """Records datagrams instead of sending them."""

    def __init__(self, failing=()):
        self.sent = []
        self.failing = set(failing)

    def sendto(self, data, address):
        if address in self.failing:
            raise OSError("network unreachable")
        self.sent.append((address, data.decode("utf-8")))

    def messages_to(self, address):
        return [text for addr, text in self.sent if addr == address]

    def clear(self):
        self.sent.clear()


def address(n):
    return ("127.0.0.1", 40000 + n)


@pytest.fixture()
def session():
    return GameSession.create(
        words=WORDS,
        liveness=LivenessMonitor(first_delay=60, interval=60),
        rng=random.Random(1234),
    )


@pytest.fixture()
def fake_socket():
    return FakeSocket()


@pytest.fixture()
def server(session, fake_socket):
    return DrawlioServer(session, sock=fake_socket)


@pytest.fixture()
def send(server):
    def _send(n, text):
        server.handle_datagram(text.encode("utf-8"), address(n))
    return _send


@pytest.fixture()
def connect(send):
    def _connect(*numbers):
        for n in numbers:
            send(n, "CONNECT")
    return _connect
