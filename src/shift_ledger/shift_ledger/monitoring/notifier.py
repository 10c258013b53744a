from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None:
        raise NotImplementedError


class LoggingNotifier:
    """Default notifier: writes the alert to the application log."""

    def notify(self, title: str, body: str) -> None:
        logger.warning("%s: %s", title, body)
