"""
Design (models.py)
- Purpose: Define simple, typed data structures for the monitored target and debounce state.
- Inputs: Field values (host/port, failure counters).
- Outputs: Frozen dataclass instances.
- Side effects: None.
- Thread-safety: All types are immutable; safe to hand across threads.
"""

import ipaddress
from dataclasses import dataclass

MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class Target:
    """
    Design (Target)
    - Purpose: The host:port the monitor watches for its whole lifetime.
    - Fields:
        host: IPv4/IPv6 literal (no DNS resolution is ever attempted).
        port: TCP port, 1-65535.
    - Raises ValueError on construction when either field is invalid.
    """
    host: str
    port: int

    def __post_init__(self) -> None:
        try:
            ipaddress.ip_address(self.host)
        except ValueError:
            raise ValueError(f"host must be an IP literal, got {self.host!r}") from None
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"port must be an integer, got {self.port!r}")
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ValueError(f"port must be in {MIN_PORT}-{MAX_PORT}, got {self.port}")

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class MonitorState:
    """
    Design (MonitorState)
    - Purpose: Debounce state owned by the monitor loop.
    - Fields:
        consecutive_failures: number of failed polls since the last success.
        status: debounced verdict; False iff consecutive_failures >= threshold.
    """
    consecutive_failures: int = 0
    status: bool = True

    def advance(self, reachable: bool, failure_threshold: int) -> "MonitorState":
        """
        Purpose: Fold one probe outcome into the state.
        Outputs: New MonitorState. A single success clears the counter (instant recovery);
                 going down takes failure_threshold failures in a row.
        """
        failures = 0 if reachable else self.consecutive_failures + 1
        return MonitorState(
            consecutive_failures=failures,
            status=failures < failure_threshold,
        )


@dataclass(frozen=True)
class InvalidPortInput:
    """
    Design (InvalidPortInput)
    - Purpose: Returned instead of a probe result when user-supplied port text is unusable.
    - Fields:
        raw: the text (or value) as received.
        reason: short human-readable explanation.
    """
    raw: str
    reason: str
