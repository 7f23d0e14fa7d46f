"""
Date and Time
=============

The first status line shows the local date and time:

    2026-10-18  21:04:05

For the last few seconds of every minute-long cycle it shows the day of
the week instead of the date:

    Sunday      21:04:55

The cycle is counted in calls, not wall-clock seconds: the line is read
once per composed frame, so ``calls_per_second`` must match the rate at
which frames are requested.
"""

import logging
from datetime import datetime, tzinfo
from typing import Callable, Final, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from szb.errors import StatsError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE: Final[str] = "Asia/Tokyo"
CYCLE_SECONDS: Final[int] = 60

DATE_FORMAT: Final[str] = "%Y-%m-%d  %H:%M:%S"
TIME_FORMAT: Final[str] = "%H:%M:%S"


def load_timezone(name: str) -> tzinfo:
    """
    Look up an IANA timezone.

    Raises:
        StatsError: If the timezone is unknown.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise StatsError(f"unknown timezone '{name}'") from e


class DateTime:
    """
    Date/time line with a periodic day-of-week display.

    Args:
        timezone: IANA timezone name.
        calls_per_second: How often ``str()`` is called per second.
        show_dow_period: Seconds per minute to show the weekday.
        now: Clock source, for tests. Receives the timezone.
    """

    def __init__(
        self,
        timezone: str = DEFAULT_TIMEZONE,
        calls_per_second: int = 2,
        show_dow_period: int = 10,
        now: Optional[Callable[[tzinfo], datetime]] = None,
    ):
        if calls_per_second < 1:
            raise ValueError(f"calls_per_second must be at least 1, got {calls_per_second}")
        if not 0 <= show_dow_period <= CYCLE_SECONDS:
            raise ValueError(
                f"show_dow_period must be 0-{CYCLE_SECONDS}, got {show_dow_period}"
            )

        self.timezone = load_timezone(timezone)
        self.calls_per_second = calls_per_second
        self.show_dow_period = show_dow_period
        self._now = now or datetime.now
        self._counter = 0

    def __str__(self) -> str:
        now = self._now(self.timezone)

        start_dow_at = (CYCLE_SECONDS - self.show_dow_period) * self.calls_per_second
        if self.show_dow_period and self._counter >= start_dow_at:
            if self._counter > CYCLE_SECONDS * self.calls_per_second:
                self._counter = 0
            result = f"{now.strftime('%A'):<12}{now.strftime(TIME_FORMAT)}"
        else:
            result = now.strftime(DATE_FORMAT)

        self._counter += 1
        return result
