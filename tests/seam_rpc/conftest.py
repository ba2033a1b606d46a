"""
Shared fixtures for engine tests

MockSocket and MockSocketServer stand in for a transport: tests drive the
'open', 'message' and 'connection' events by hand and inspect what the
engines sent.
"""

import threading

import pytest

from seam_rpc.rpc.events import EventEmitter


class MockSocket(EventEmitter):
    """Channel recording every frame passed to send()"""

    def __init__(self):
        super().__init__()
        self.sent = []
        self._sent_changed = threading.Condition()

    def send(self, message):
        with self._sent_changed:
            self.sent.append(message)
            self._sent_changed.notify_all()

    @property
    def last_sent(self):
        return self.sent[-1] if self.sent else None

    def wait_for_sent(self, count, timeout=2.0):
        """Block until at least count frames were sent"""
        with self._sent_changed:
            return self._sent_changed.wait_for(lambda: len(self.sent) >= count, timeout=timeout)


class MockSocketServer(EventEmitter):
    """Acceptor without broadcast support unless clients is assigned"""

    def connect(self):
        socket = MockSocket()
        self.emit("connection", socket)
        return socket


@pytest.fixture
def socket():
    return MockSocket()


@pytest.fixture
def socket_server():
    return MockSocketServer()


@pytest.fixture
def make_socket():
    """Factory for standalone sockets not announced to any server"""
    return MockSocket
