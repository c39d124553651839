"""
Design (config.py)
- Purpose: Centralize constants and defaults for the monitor, prober and listeners.
- Inputs: None.
- Outputs: Constants (target defaults, intervals, timeouts, listener ports).
- Side effects: None.
- Thread-safety: N/A (read-only constants).
"""

# Target watched by the background monitor (IP literal; no DNS lookups are made)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 80

POLL_INTERVAL_SEC = 5

## Debounce behavior
FAILURE_THRESHOLD = 3           # go OFFLINE after 3 consecutive failed polls (~15s)
MONITOR_PROBE_TIMEOUT_MS = 500  # connect timeout per monitor poll

# On-demand port tests are interactive, so keep them snappy
PORT_TEST_TIMEOUT_MS = 200
PROBE_MAX_WORKERS = 8

# Port simulator: port number -> label (non-positive ports are disabled entries)
LISTENER_PORTS = {
    7129: "CLS",
    7130: "OCR",
    -1: "-1",
}
LISTENER_HOST = "127.0.0.1"
LISTENER_BACKLOG = 16
LISTENER_ACCEPT_POLL_SEC = 0.1

NOTIFICATION_TITLE = "Server Status Change"
NOTIFICATION_TIMEOUT_SEC = 5

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
