"""
Design (repository.py)
- Purpose: Encapsulate the published server status behind a tiny API (and a lock), so the
           console, health checks and the monitor never share a bare global flag.
- Inputs: Status booleans written by the monitor.
- Outputs: The current status, or a snapshot with last-change time and write generation.
- Side effects: Updates internal fields; timestamps flips.
- Thread-safety: One writer (the monitor), any number of readers. Every method holds the lock
                 for O(1) work only, so readers are never held up by a slow writer.
"""

import threading
from datetime import datetime
from typing import Tuple


class StatusCell:
    """
    Design (StatusCell)
    - State:
        _status: last published online/offline verdict (starts ONLINE)
        _last_change: timestamp of the last flip, '' until the first one
        _generation: number of writes so far
        _lock: threading.Lock protecting all three fields together
    """

    def __init__(self, initial: bool = True) -> None:
        self._lock = threading.Lock()
        self._status = bool(initial)
        self._last_change = ""
        self._generation = 0

    def read(self) -> bool:
        """
        Purpose: Current status. May be up to one poll interval stale.
        Thread-safety: Protected by _lock.
        """
        with self._lock:
            return self._status

    def write(self, online: bool) -> bool:
        """
        Purpose: Publish the monitor's verdict for this poll cycle.
        Inputs: online (bool)
        Outputs: True if the published value flipped.
        Side effects: Stamps _last_change on a flip; bumps _generation.
        Thread-safety: Protected by _lock.
        """
        if not isinstance(online, bool):
            raise TypeError(f"status must be a bool, got {type(online).__name__}")
        with self._lock:
            changed = online != self._status
            self._status = online
            self._generation += 1
            if changed:
                self._last_change = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            return changed

    def snapshot(self) -> Tuple[bool, str, int]:
        """
        Purpose: Consistent view of status, last change and generation.
        Outputs: (status, last_change, generation)
        Thread-safety: Protected by _lock.
        """
        with self._lock:
            return self._status, self._last_change, self._generation
