"""
Background Statistics Providers
===============================

Status lines such as CPU load or network addresses are expensive or slow
to compute, so each provider refreshes its text on a daemon thread and
the composing loop only reads the latest string.

Thread Safety
-------------
The refresher builds a complete new ``str`` and publishes it with a
single attribute assignment. Readers calling ``str(provider)`` therefore
always see either the previous or the next full line, never a torn one,
without taking a lock.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class StatsProvider(ABC):
    """
    Abstract base class for periodically refreshed status lines.

    Subclasses implement ``render`` to compute a fresh line. Errors raised
    by ``render`` are logged and the previous line is kept.

    Attributes:
        interval: Seconds between refreshes
    """

    #: Shown until the first successful refresh
    placeholder: str = ""

    def __init__(self, interval: float):
        self.interval = interval
        self._text = self.placeholder
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @abstractmethod
    def render(self) -> str:
        """Compute the current line. May raise; see ``refresh``."""
        pass

    def refresh(self) -> bool:
        """
        Recompute and publish the line.

        Returns:
            True on success, False if rendering failed.
        """
        try:
            text = self.render()
        except Exception as e:
            logger.warning("%s refresh failed: %s", type(self).__name__, e)
            return False
        self._text = text
        return True

    def start(self) -> None:
        """Refresh once, then keep refreshing on a daemon thread."""
        if self._thread is not None:
            return
        self.refresh()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=f"{type(self).__name__}-refresh",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Started %s (every %.1fs)", type(self).__name__, self.interval)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Stop the refresher thread."""
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.refresh()

    def __str__(self) -> str:
        return self._text
