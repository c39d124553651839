"""
Design (prober.py)
- Purpose: On-demand port tests for the console ("test <port>", "test all").
- Inputs: host literal, port as typed by the user (str) or int, timeout in ms.
- Outputs: True/False for open/closed, or an InvalidPortInput value for unusable input.
- Side effects: One short-lived socket per probe (via is_host_reachable).
- Thread-safety: Stateless; safe to run alongside the monitor and alongside other probes.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Union

from .config import PORT_TEST_TIMEOUT_MS, PROBE_MAX_WORKERS
from .models import MAX_PORT, MIN_PORT, InvalidPortInput
from .utils import is_host_reachable

ProbeResult = Union[bool, InvalidPortInput]


def parse_port(raw: Union[int, str]) -> Union[int, InvalidPortInput]:
    """
    Purpose: Turn user input into a port number without raising.
    Inputs: raw (int or text such as " 8080 ")
    Outputs: The port as int, or InvalidPortInput describing why it was rejected.
    """
    if isinstance(raw, bool):
        return InvalidPortInput(str(raw), "not a port number")
    if isinstance(raw, int):
        port = raw
    else:
        text = str(raw).strip()
        if not text.isdigit() or not text.isascii():
            return InvalidPortInput(str(raw), "not a port number")
        port = int(text)
    if not MIN_PORT <= port <= MAX_PORT:
        return InvalidPortInput(str(raw), f"port must be between {MIN_PORT} and {MAX_PORT}")
    return port


def probe_port(host: str, port: Union[int, str], timeout_ms: int = PORT_TEST_TIMEOUT_MS) -> ProbeResult:
    """
    Purpose: Test whether host:port accepts a TCP connection.
    Outputs: True (open), False (closed/unreachable), or InvalidPortInput when the port is
             unusable, in which case no connection is attempted.
    """
    parsed = parse_port(port)
    if isinstance(parsed, InvalidPortInput):
        return parsed
    return is_host_reachable(host, parsed, timeout_ms)


def probe_ports(
    host: str,
    ports: Iterable[Union[int, str]],
    timeout_ms: int = PORT_TEST_TIMEOUT_MS,
    max_workers: int = PROBE_MAX_WORKERS,
) -> Dict[Union[int, str], ProbeResult]:
    """
    Purpose: Probe several ports concurrently ("test all").
    Outputs: {port as given -> result}, in input order.
    """
    ports = list(dict.fromkeys(ports))
    if not ports:
        return {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(ports))) as pool:
        results = pool.map(lambda p: probe_port(host, p, timeout_ms), ports)
        return dict(zip(ports, results))
