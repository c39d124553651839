"""
Design (listeners.py)
- Purpose: Simulate open ports on loopback so the prober and monitor have something to hit.
- Inputs: Port numbers and labels (from config.LISTENER_PORTS or console commands).
- Outputs: Bound port numbers; a {port -> label} view of what is running.
- Side effects: Binds listening sockets; one daemon thread per port that accepts and
                immediately closes each connection.
- Thread-safety: The pool's dict is guarded by a lock; each listener thread owns its socket.
"""

import logging
import socket
import threading
from typing import Dict, List, Mapping, Optional

from .config import LISTENER_ACCEPT_POLL_SEC, LISTENER_BACKLOG, LISTENER_HOST, LISTENER_PORTS

logger = logging.getLogger(__name__)


class _Listener:
    def __init__(self, sock: socket.socket, port: int, label: str) -> None:
        self.sock = sock
        self.port = port
        self.label = label
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, name=f"listener-{port}", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def close(self) -> None:
        self._stop.set()
        self._thread.join(LISTENER_ACCEPT_POLL_SEC * 10)
        self.sock.close()

    def _serve(self) -> None:
        self.sock.settimeout(LISTENER_ACCEPT_POLL_SEC)
        while not self._stop.is_set():
            try:
                client, peer = self.sock.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                if not self._stop.is_set():
                    logger.error("Listener on port %d error: %s", self.port, exc)
                return
            # Close immediately: the connect itself is the test
            with client:
                logger.info("[%d] Connection from %s:%s", self.port, peer[0], peer[1])


class PortListenerPool:
    """
    Design (PortListenerPool)
    - State:
        _listeners: {bound port -> _Listener}
        _lock: threading.Lock protecting _listeners
    """

    def __init__(self, host: str = LISTENER_HOST) -> None:
        self.host = host
        self._lock = threading.Lock()
        self._listeners: Dict[int, _Listener] = {}

    def start(self, port: int, label: str = "MANUAL") -> Optional[int]:
        """
        Purpose: Start listening on port (0 picks an ephemeral port).
        Outputs: The bound port, or None if it is already running or could not be bound.
        """
        with self._lock:
            if port in self._listeners:
                logger.warning("Port %d already running.", port)
                return None
            try:
                sock = socket.create_server((self.host, port), backlog=LISTENER_BACKLOG)
            except (OSError, OverflowError) as exc:
                logger.error("Failed to start port %d: %s", port, exc)
                return None
            bound = sock.getsockname()[1]
            listener = _Listener(sock, bound, label)
            self._listeners[bound] = listener
        listener.start()
        logger.info("Listening on port %d (%s)", bound, label)
        return bound

    def stop(self, port: int) -> bool:
        with self._lock:
            listener = self._listeners.pop(port, None)
        if listener is None:
            logger.warning("Port %d not running.", port)
            return False
        listener.close()
        logger.info("Stopped listening on port %d", port)
        return True

    def stop_all(self) -> None:
        for port in list(self.ports()):
            self.stop(port)

    def ports(self) -> Dict[int, str]:
        with self._lock:
            return {port: listener.label for port, listener in self._listeners.items()}

    def start_configured(self, config: Mapping[int, str] = LISTENER_PORTS) -> List[int]:
        """Start every enabled (positive) port in config; returns the ports actually bound."""
        started = []
        for port, label in config.items():
            if port <= 0:
                continue
            bound = self.start(port, label)
            if bound is not None:
                started.append(bound)
        return started
