"""
Design (utils.py)
- Purpose: Reusable helpers: the timeout-bounded TCP connect check used by both the monitor
           and the port prober, plus small formatting helpers.
- Inputs: ip (literal), port, timeout in milliseconds.
- Outputs: Helper results (bools, strings).
- Side effects: is_host_reachable opens (and always closes) one socket per call.
- Thread-safety: Stateless apart from the resource-exhaustion latch, which is lock-protected;
                 safe to call from any thread.
"""

import errno
import ipaddress
import logging
import selectors
import socket
import threading

logger = logging.getLogger(__name__)


def _errnos(*names: str) -> frozenset[int]:
    # Some codes only exist on one platform (e.g. WSAEWOULDBLOCK on Windows)
    return frozenset(getattr(errno, name) for name in names if hasattr(errno, name))


# connect_ex() results meaning "connection is underway, wait for writability"
_IN_PROGRESS = _errnos("EINPROGRESS", "EWOULDBLOCK", "EAGAIN", "EALREADY", "WSAEWOULDBLOCK")

# socket() failures meaning the process cannot open sockets at all right now
_EXHAUSTED = _errnos("EMFILE", "ENFILE", "ENOBUFS", "ENOMEM")

_exhausted_lock = threading.Lock()
_exhausted = False


def resources_exhausted() -> bool:
    """
    Purpose: Report whether the last socket creation failed for lack of local resources.
    Outputs: True while degraded (probes then report unreachable), else False.
    Thread-safety: Safe.
    """
    with _exhausted_lock:
        return _exhausted


def _set_exhausted(value: bool, exc: OSError | None = None) -> None:
    global _exhausted
    with _exhausted_lock:
        if _exhausted == value:
            return
        _exhausted = value
    if value:
        logger.error(
            "Cannot create sockets (%s); every probe reports unreachable until resources recover",
            exc,
        )
    else:
        logger.info("Socket creation recovered")


def _open_socket(family: int) -> socket.socket | None:
    try:
        sock = socket.socket(family, socket.SOCK_STREAM)
    except OSError as exc:
        if exc.errno in _EXHAUSTED:
            _set_exhausted(True, exc)
        else:
            logger.debug("Socket creation failed: %s", exc)
        return None
    _set_exhausted(False)
    return sock


def is_host_reachable(ip: str, port: int = 80, timeout_ms: int = 500) -> bool:
    """
    Purpose: Attempt one TCP connection to ip:port without blocking longer than timeout_ms.
    Inputs: ip (IPv4/IPv6 literal), port (1-65535), timeout_ms (> 0)
    Outputs: True only if the connect completed and SO_ERROR is clear. Refusal, timeout,
             a non-literal host and any socket error all give False.
    Side Effects: Opens a non-blocking socket, waits for writability, closes it on every path.
    Thread-safety: Safe; each call owns its socket.
    """
    if timeout_ms <= 0:
        raise ValueError(f"timeout_ms must be > 0, got {timeout_ms}")
    try:
        family = socket.AF_INET6 if ipaddress.ip_address(ip).version == 6 else socket.AF_INET
    except ValueError:
        logger.debug("%r is not an IP literal; treating as unreachable", ip)
        return False

    sock = _open_socket(family)
    if sock is None:
        return False

    with sock:
        try:
            sock.setblocking(False)
            code = sock.connect_ex((ip, port))
            if code == 0:
                return True
            if code not in _IN_PROGRESS:
                logger.debug("Connect to %s:%s failed immediately: %s", ip, port, errno.errorcode.get(code, code))
                return False

            with selectors.DefaultSelector() as selector:
                selector.register(sock, selectors.EVENT_WRITE)
                ready = selector.select(timeout_ms / 1000)
            if not ready:
                logger.debug("Connect to %s:%s timed out after %sms", ip, port, timeout_ms)
                return False

            so_error = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except (OSError, OverflowError, TypeError) as exc:
            logger.debug("Connect to %s:%s errored: %s", ip, port, exc)
            return False

    if so_error:
        logger.debug("Connect to %s:%s failed: %s", ip, port, errno.errorcode.get(so_error, so_error))
    return so_error == 0


def format_status(online: bool) -> str:
    """Render a debounced status the way the console prints it."""
    return "Online" if online else "Offline"


def format_port_result(open_: bool) -> str:
    return "Open" if open_ else "Closed"
