"""
Design (notify.py)
- Purpose: Pop a desktop notification when the monitored server flips Online/Offline.
- Inputs: Target and the new debounced status.
- Outputs: None.
- Side effects: Calls plyer's platform notification backend.
- Thread-safety: Called from the monitor thread; plyer backends are fire-and-forget.
"""

import logging

from plyer import notification

from .config import NOTIFICATION_TIMEOUT_SEC, NOTIFICATION_TITLE
from .models import Target
from .utils import format_status

logger = logging.getLogger(__name__)


def notify_status_change(target: Target, online: bool) -> None:
    """Best effort: a missing or broken notification backend is logged, not raised."""
    try:
        notification.notify(
            title=NOTIFICATION_TITLE,
            message=f"Server {target} status is now: {format_status(online).upper()}",
            timeout=NOTIFICATION_TIMEOUT_SEC,
        )
    except Exception as exc:
        # plyer raises NotImplementedError (or backend-specific errors) on headless hosts
        logger.warning("Desktop notification failed: %s", exc)
