import errno
import logging
import socket
import time

import pytest

from server_monitor import utils
from server_monitor.utils import format_status, is_host_reachable, resources_exhausted


def test_listening_port_is_reachable(listening_port):
    assert is_host_reachable("127.0.0.1", listening_port, 500) is True


def test_closed_port_is_unreachable_within_timeout(closed_port):
    start = time.monotonic()
    assert is_host_reachable("127.0.0.1", closed_port, 300) is False
    assert time.monotonic() - start < 0.3 + 0.5


def test_blackholed_address_never_hangs():
    # TEST-NET-1 is not routed; depending on the host this times out or fails fast
    start = time.monotonic()
    assert is_host_reachable("192.0.2.1", 81, 200) is False
    assert time.monotonic() - start < 0.2 + 0.5


def test_non_literal_host_is_unreachable_without_dns(monkeypatch):
    def no_dns(*args, **kwargs):
        raise AssertionError("DNS lookup attempted")

    monkeypatch.setattr(socket, "getaddrinfo", no_dns)
    assert is_host_reachable("localhost", 80, 100) is False


def test_out_of_range_port_is_unreachable():
    assert is_host_reachable("127.0.0.1", 70000, 100) is False


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        is_host_reachable("127.0.0.1", 80, 0)


@pytest.mark.parametrize("use_listener", [True, False])
def test_socket_closed_on_every_path(monkeypatch, listening_port, closed_port, use_listener):
    created = []
    real_socket = socket.socket

    class TrackingSocket(real_socket):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(socket, "socket", TrackingSocket)
    port = listening_port if use_listener else closed_port
    is_host_reachable("127.0.0.1", port, 200)

    assert len(created) == 1
    assert created[0].fileno() == -1


def test_socket_creation_failure_is_unreachable(monkeypatch):
    def refuse(*args, **kwargs):
        raise OSError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(socket, "socket", refuse)
    assert is_host_reachable("127.0.0.1", 80, 100) is False
    assert resources_exhausted() is False


def test_resource_exhaustion_reported_once_then_recovers(monkeypatch, caplog, closed_port):
    def exhausted(*args, **kwargs):
        raise OSError(errno.EMFILE, "Too many open files")

    real_socket = socket.socket
    caplog.set_level(logging.INFO, logger=utils.__name__)
    monkeypatch.setattr(socket, "socket", exhausted)
    assert is_host_reachable("127.0.0.1", closed_port, 100) is False
    assert is_host_reachable("127.0.0.1", closed_port, 100) is False
    assert resources_exhausted() is True
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1

    monkeypatch.setattr(socket, "socket", real_socket)
    is_host_reachable("127.0.0.1", closed_port, 100)
    assert resources_exhausted() is False
    assert any("recovered" in r.getMessage() for r in caplog.records)


def test_format_status():
    assert format_status(True) == "Online"
    assert format_status(False) == "Offline"
