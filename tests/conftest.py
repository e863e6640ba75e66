import socket

import pytest


class FakeSocket:
    """Stands in for socket.socket; records what the code under test does with it."""

    instances = []

    def __init__(self, family=socket.AF_INET, type=socket.SOCK_DGRAM):
        self.family = family
        self.type = type
        self.sent = []
        self.bound = None
        self.timeout = None
        self.closed = False
        self.reply = None
        self.send_error = None
        self.recv_calls = 0
        FakeSocket.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def settimeout(self, timeout):
        self.timeout = timeout

    def bind(self, address):
        self.bound = address

    def sendto(self, data, address):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((data, address))
        return len(data)

    def recvfrom(self, bufsize):
        self.recv_calls += 1
        if self.reply is None:
            raise socket.timeout("timed out")
        return self.reply, ("192.0.2.10", 9999)

    def close(self):
        self.closed = True


class RecordingSink:
    def __init__(self):
        self.calls = []

    def set(self, path, value):
        self.calls.append((path, value))


@pytest.fixture
def fake_socket_factory():
    """A socket factory whose sockets can be configured before the exchange runs."""
    FakeSocket.instances = []
    config = {}

    def factory(family, type):
        sock = FakeSocket(family, type)
        sock.reply = config.get("reply")
        sock.send_error = config.get("send_error")
        return sock

    factory.config = config
    factory.instances = FakeSocket.instances
    return factory


@pytest.fixture
def sink():
    return RecordingSink()
