import socket

import pytest

from server_monitor import utils
from server_monitor.listeners import PortListenerPool


@pytest.fixture
def listening_port():
    """A loopback port with a live listener (the kernel completes handshakes without accept)."""
    server = socket.create_server(("127.0.0.1", 0))
    try:
        yield server.getsockname()[1]
    finally:
        server.close()


@pytest.fixture
def closed_port():
    """A loopback port nothing is listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def pool():
    pool = PortListenerPool()
    yield pool
    pool.stop_all()


@pytest.fixture(autouse=True)
def reset_exhaustion_latch(monkeypatch):
    monkeypatch.setattr(utils, "_exhausted", False)


class ScriptedProbe:
    """Stands in for is_host_reachable, replaying a fixed list of outcomes."""

    def __init__(self, outcomes, default=True):
        self.outcomes = list(outcomes)
        self.default = default
        self.calls = []

    def __call__(self, host, port, timeout_ms):
        self.calls.append((host, port, timeout_ms))
        if self.outcomes:
            return self.outcomes.pop(0)
        return self.default


@pytest.fixture
def scripted_probe():
    return ScriptedProbe
