"""
Entry point: wire the monitor, listener pool and console together.

Design:
- Parse CLI flags (defaults come from server_monitor.config).
- Configure logging; -v turns on the per-poll DEBUG lines.
- Start the background monitor (desktop notifications on status flips unless --no-notify).
- Optionally start the configured port listeners (--listen).
- Run the console until 'exit' or EOF, then stop listeners and the monitor cleanly.
"""

import argparse
import logging
import sys

from server_monitor.config import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    FAILURE_THRESHOLD,
    LOG_FORMAT,
    MONITOR_PROBE_TIMEOUT_MS,
    POLL_INTERVAL_SEC,
    PORT_TEST_TIMEOUT_MS,
)
from server_monitor.console import CommandConsole
from server_monitor.listeners import PortListenerPool
from server_monitor.models import Target
from server_monitor.monitor import ServerMonitor
from server_monitor.notify import notify_status_change


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Server monitor & port tester")
    parser.add_argument("--host", default=DEFAULT_HOST, help="IP address to monitor")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port to monitor")
    parser.add_argument("--interval", type=float, default=POLL_INTERVAL_SEC, help="seconds between polls")
    parser.add_argument("--threshold", type=int, default=FAILURE_THRESHOLD,
                        help="consecutive failures before the server counts as offline")
    parser.add_argument("--probe-timeout-ms", type=int, default=MONITOR_PROBE_TIMEOUT_MS)
    parser.add_argument("--test-timeout-ms", type=int, default=PORT_TEST_TIMEOUT_MS)
    parser.add_argument("--listen", action="store_true", help="start the configured port listeners")
    parser.add_argument("--no-notify", action="store_true", help="disable desktop notifications")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every poll")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.test_timeout_ms <= 0:
        parser.error("--test-timeout-ms must be > 0")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    try:
        target = Target(args.host, args.port)
        monitor = ServerMonitor(
            target,
            interval_sec=args.interval,
            failure_threshold=args.threshold,
            probe_timeout_ms=args.probe_timeout_ms,
            on_change=None if args.no_notify else notify_status_change,
        )
    except ValueError as exc:
        parser.error(str(exc))

    pool = PortListenerPool()
    if args.listen:
        pool.start_configured()

    monitor.start()
    try:
        CommandConsole(monitor, pool, test_timeout_ms=args.test_timeout_ms).run()
    except KeyboardInterrupt:
        pass
    finally:
        pool.stop_all()
        monitor.stop()
        monitor.join(args.probe_timeout_ms / 1000 + 1)
    return 0


if __name__ == "__main__":
    sys.exit(main())
