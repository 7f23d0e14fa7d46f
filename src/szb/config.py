"""
szb Configuration
=================

Run-time settings with defaults. Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line options (applied by the CLI, highest precedence)

Environment variables (all optional):
    SZB_PORT: Serial device path
    SZB_BAUD: Baud rate (integer)
    SZB_OVERFLOW: Overflow style token
    SZB_TIMEZONE: IANA timezone name
    OWM_API_KEY: OpenWeatherMap API key (enables weather with --lat/--lon)
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Optional

from szb.comms.serial import DEFAULT_BAUD_RATE
from szb.display.parser import WRAP_STYLE
from szb.stats.clock import DEFAULT_TIMEZONE
from szb.stats.weather import API_KEY_ENV, Coordinates

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """
    Settings for one run of the display host.

    Attributes:
        port: Serial device path, None to auto-detect
        baud_rate: Serial baud rate
        overflow_style: "wrap" or four comma-separated line styles
        timezone: IANA timezone for the clock line
        render_rate: Frames requested per second by the device
        show_dow_period: Seconds per minute showing the weekday
        prompt_delay: Seconds to wait before answering a prompt
        weather_coordinates: Location for weather, None to disable
        owm_api_key: OpenWeatherMap API key
    """

    port: Optional[str] = None
    baud_rate: int = DEFAULT_BAUD_RATE
    overflow_style: str = WRAP_STYLE
    timezone: str = DEFAULT_TIMEZONE
    render_rate: int = 2
    show_dow_period: int = 10
    prompt_delay: float = 0.5
    weather_coordinates: Optional[Coordinates] = None
    owm_api_key: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Create AppConfig from environment variables.

        Invalid numeric values are logged and ignored.
        """
        config = cls()

        if port := os.environ.get("SZB_PORT"):
            config.port = port

        if baud := os.environ.get("SZB_BAUD"):
            try:
                config.baud_rate = int(baud)
            except ValueError:
                logger.warning("Ignoring invalid SZB_BAUD: %r", baud)

        if overflow := os.environ.get("SZB_OVERFLOW"):
            config.overflow_style = overflow

        if timezone := os.environ.get("SZB_TIMEZONE"):
            config.timezone = timezone

        if api_key := os.environ.get(API_KEY_ENV):
            config.owm_api_key = api_key

        return config

    def with_overrides(self, **overrides) -> "AppConfig":
        """
        Return a copy with the given fields replaced.

        None values are skipped so unset CLI options keep the current value.
        """
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def weather_enabled(self) -> bool:
        """True if weather has both a location and an API key."""
        return self.weather_coordinates is not None and bool(self.owm_api_key)
