import io

import pytest

import main


def test_parser_defaults():
    args = main.build_parser().parse_args([])
    assert (args.host, args.port, args.interval, args.threshold) == ("127.0.0.1", 80, 5, 3)
    assert args.probe_timeout_ms == 500
    assert args.test_timeout_ms == 200


@pytest.mark.parametrize("argv", [
    ["--host", "example.com"],
    ["--port", "0"],
    ["--threshold", "0"],
    ["--interval", "0.1", "--probe-timeout-ms", "500"],
    ["--test-timeout-ms", "0"],
])
def test_bad_configuration_exits_with_usage_error(argv):
    with pytest.raises(SystemExit) as excinfo:
        main.main(argv)
    assert excinfo.value.code == 2


def test_runs_console_and_shuts_down(monkeypatch, capsys, closed_port):
    monkeypatch.setattr("sys.stdin", io.StringIO("status\nexit\n"))
    assert main.main(["--port", str(closed_port), "--no-notify", "--probe-timeout-ms", "50"]) == 0
    assert "[Server status] Online" in capsys.readouterr().out
