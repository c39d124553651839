import pytest

from server_monitor.models import MonitorState, Target


def test_target_accepts_ipv4_and_ipv6_literals():
    assert str(Target("10.0.0.5", 80)) == "10.0.0.5:80"
    assert str(Target("::1", 443)) == "[::1]:443"


@pytest.mark.parametrize("host,port", [
    ("example.com", 80),
    ("", 80),
    ("127.0.0.1", 0),
    ("127.0.0.1", 65536),
    ("127.0.0.1", "80"),
    ("127.0.0.1", True),
])
def test_target_rejects_bad_fields(host, port):
    with pytest.raises(ValueError):
        Target(host, port)


def test_target_is_immutable():
    target = Target("127.0.0.1", 80)
    with pytest.raises(AttributeError):
        target.port = 81


def test_advance_counts_failures_and_flips_at_threshold():
    state = MonitorState()
    state = state.advance(False, 3)
    assert state == MonitorState(1, True)
    state = state.advance(False, 3)
    assert state == MonitorState(2, True)
    state = state.advance(False, 3)
    assert state == MonitorState(3, False)
    state = state.advance(False, 3)
    assert state == MonitorState(4, False)


def test_single_success_recovers_immediately():
    state = MonitorState(10, False).advance(True, 3)
    assert state == MonitorState(0, True)


def test_threshold_of_one_flips_on_first_failure():
    assert MonitorState().advance(False, 1).status is False
