"""Shared fixtures for unit tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("wire_oracle")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


class FakeSocket:
    """Socket stub replaying canned reads and recording every sendall call."""

    def __init__(self, chunks=(), fail_after_sends=None):
        self._chunks = [
            chunk if isinstance(chunk, bytes) else chunk.encode() for chunk in chunks
        ]
        self.sent: list[bytes] = []
        self.closed = False
        self._fail_after_sends = fail_after_sends

    def recv(self, _):
        if self._chunks:
            return self._chunks.pop(0)
        return b""

    def sendall(self, data):
        limit = self._fail_after_sends
        if limit is not None and len(self.sent) >= limit:
            raise BrokenPipeError(32, "Broken pipe")
        self.sent.append(bytes(data))

    def settimeout(self, _):
        pass

    def shutdown(self, _):
        pass

    def close(self):
        self.closed = True
        self._chunks.clear()


@pytest.fixture(name="fake_socket_factory")
def _fake_socket_factory():
    return FakeSocket
