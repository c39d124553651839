"""
Design (console.py)
- Purpose: Interactive command loop on top of the monitor, prober and listener pool.
- Inputs: Lines from an input stream (stdin by default).
- Outputs: One or more result lines per command on an output stream.
- Side effects: Port probes and listener start/stop.
- Thread-safety: Runs on the main thread; reads status through the monitor's StatusCell.
"""

import sys
from typing import Mapping, Optional, TextIO

from .config import LISTENER_PORTS, PORT_TEST_TIMEOUT_MS
from .listeners import PortListenerPool
from .models import InvalidPortInput
from .monitor import ServerMonitor
from .prober import parse_port, probe_port, probe_ports
from .utils import format_port_result, format_status

HELP_TEXT = """Commands:
  status              - Show server status
  test <port>         - Test specific port on the monitored host
  test all            - Test all configured listener ports
  start <port> [name] - Start listening on a port
  stop <port>         - Stop listening on a port
  help                - Show this help
  exit                - Quit"""


class CommandConsole:
    def __init__(
        self,
        monitor: ServerMonitor,
        pool: Optional[PortListenerPool] = None,
        test_timeout_ms: int = PORT_TEST_TIMEOUT_MS,
        listener_ports: Mapping[int, str] = LISTENER_PORTS,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.monitor = monitor
        self.pool = pool if pool is not None else PortListenerPool()
        self.test_timeout_ms = test_timeout_ms
        self.listener_ports = listener_ports
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def _print(self, text: str) -> None:
        print(text, file=self.stdout, flush=True)

    def run(self) -> None:
        self._print("=== Server Monitor & Port Tester ===")
        self._print(HELP_TEXT)
        while True:
            self.stdout.write("> ")
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                # EOF behaves like exit
                self._print("")
                return
            if not self.execute(line):
                return

    def execute(self, line: str) -> bool:
        """Handle one command line; returns False when the console should exit."""
        command, _, arg = line.strip().partition(" ")
        arg = arg.strip()

        if command == "exit":
            return False
        if command == "":
            return True
        if command == "help":
            self._print(HELP_TEXT)
        elif command == "status":
            self._status()
        elif command == "test" and arg == "all":
            self._test_all()
        elif command == "test" and arg:
            self._test(arg)
        elif command == "start" and arg:
            port_text, _, label = arg.partition(" ")
            self._start(port_text, label.strip() or "MANUAL")
        elif command == "stop" and arg:
            self._stop(arg)
        else:
            self._print("[!] Unknown command.")
        return True

    def _status(self) -> None:
        online, last_change, _ = self.monitor.cell.snapshot()
        line = f"[Server status] {format_status(online)}"
        if last_change:
            line += f" (since {last_change})"
        self._print(line)

    def _test(self, raw: str) -> None:
        result = probe_port(self.monitor.target.host, raw, self.test_timeout_ms)
        if isinstance(result, InvalidPortInput):
            self._print("[!] Invalid port number.")
            return
        self._print(f"[Port {raw.strip()}] {format_port_result(result)}")

    def _test_all(self) -> None:
        ports = [p for p in self.listener_ports if p > 0]
        ports += [p for p in self.pool.ports() if p not in ports]
        if not ports:
            self._print("[!] No listener ports configured.")
            return
        results = probe_ports(self.pool.host, ports, self.test_timeout_ms)
        for port, ok in results.items():
            mark = "[✓]" if ok else "[✗]"
            self._print(f"{mark} Connection to port {port} {'succeeded' if ok else 'failed'}.")

    def _start(self, raw: str, label: str) -> None:
        port = parse_port(raw)
        if isinstance(port, InvalidPortInput):
            self._print("[!] Invalid port number.")
            return
        bound = self.pool.start(port, label)
        if bound is None:
            self._print(f"[X] Could not listen on port {port}.")
        else:
            self._print(f"[+] Listening on port {bound} ({label})")

    def _stop(self, raw: str) -> None:
        port = parse_port(raw)
        if isinstance(port, InvalidPortInput):
            self._print("[!] Invalid port number.")
            return
        if self.pool.stop(port):
            self._print(f"[-] Stopped listening on port {port}")
        else:
            self._print(f"[!] Port {port} not running.")
