"""
In-app alert delivery.

The router raises short alerts (e.g. "You have 3 new notifications!") that
the front-end shows as toasts. Sinks decide where they go.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, List

logger = logging.getLogger(__name__)


class AlertSink(ABC):
    """Receives alerts raised by a notification router."""

    @abstractmethod
    def notify(self, title: str, description: str) -> None:
        pass


class QueuedAlertSink(AlertSink):
    """
    Buffers alerts until the next response picks them up.

    Each viewer session gets its own queue; `drain()` hands every pending
    alert over exactly once.
    """

    def __init__(self, max_pending: int = 20):
        self._pending: Deque[Dict[str, str]] = deque(maxlen=max_pending)

    def notify(self, title: str, description: str) -> None:
        self._pending.append({"title": title, "description": description})

    def drain(self) -> List[Dict[str, str]]:
        alerts = list(self._pending)
        self._pending.clear()
        return alerts

    def __len__(self) -> int:
        return len(self._pending)


class LoggingAlertSink(AlertSink):
    """Writes alerts to the application log."""

    def notify(self, title: str, description: str) -> None:
        logger.info(f"Alert: {title} {description}")
