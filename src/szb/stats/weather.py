"""
Current Weather
===============

Shows the current weather from OpenWeatherMap (through pyowm), centred on a
20-column line and alternating between the description and the
temperature:

    "   scattered clouds "
    "       18.5ºC       "

Timing (on a 10 second tick):
- every 30 seconds the description is selected
- every 50 seconds the temperature is selected
- every 5 minutes the data is fetched again

The API key is read from the OWM_API_KEY environment variable.
"""

import logging
import os
from dataclasses import dataclass
from typing import Final, Optional

from pyowm import OWM
from pyowm.commons.exceptions import PyOWMError
from pyowm.utils.config import get_default_config

from szb.display.layout import LINE_WIDTH
from szb.errors import StatsError
from szb.stats.provider import StatsProvider

logger = logging.getLogger(__name__)

API_KEY_ENV: Final[str] = "OWM_API_KEY"

TICK_SECONDS: Final[int] = 10
DESCRIPTION_EVERY: Final[int] = 30
TEMPERATURE_EVERY: Final[int] = 50
FETCH_EVERY: Final[int] = 5 * 60

REQUEST_TIMEOUT: Final[float] = 10.0


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class CurrentWeather:
    """The fields of a current-weather observation that we display."""
    description: str
    temperature: float

    @classmethod
    def from_observation(cls, observation) -> "CurrentWeather":
        """Extract the displayed fields from a pyowm Observation."""
        weather = observation.weather
        return cls(
            description=str(weather.detailed_status),
            temperature=float(weather.temperature("celsius")["temp"]),
        )


def center(text: str, width: int = LINE_WIDTH) -> str:
    """Centre text in width columns; odd padding goes to the left."""
    if len(text) >= width:
        return text
    right = (width - len(text)) // 2
    left = width - len(text) - right
    return " " * left + text + " " * right


def weather_manager(api_key: str, timeout: float = REQUEST_TIMEOUT):
    """
    Build a pyowm weather manager with English descriptions.

    Args:
        api_key: OpenWeatherMap API key
        timeout: Request timeout in seconds
    """
    config = get_default_config()
    config["language"] = "en"
    config["connection"]["timeout_secs"] = timeout
    return OWM(api_key, config).weather_manager()


def fetch_current_weather(manager, coordinates: Coordinates) -> CurrentWeather:
    """
    Fetch the current weather at the given coordinates.

    Raises:
        PyOWMError: On network, authentication or API failure.
    """
    observation = manager.weather_at_coords(
        lat=coordinates.latitude,
        lon=coordinates.longitude,
    )
    return CurrentWeather.from_observation(observation)


class WeatherStats(StatsProvider):
    """
    Current weather line, refreshed in the background.

    Raises:
        StatsError: If no API key is configured.
    """

    placeholder = "(fetching...)"

    def __init__(
        self,
        coordinates: Coordinates,
        api_key: Optional[str] = None,
        interval: float = TICK_SECONDS,
    ):
        api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not api_key:
            raise StatsError(f"{API_KEY_ENV} is empty")

        super().__init__(interval)
        self.coordinates = coordinates
        self._manager = weather_manager(api_key)
        self._current: Optional[CurrentWeather] = None
        self._showing = "desc"
        self._elapsed = 0

    def fetch(self) -> None:
        """Fetch fresh data from the API."""
        self._current = fetch_current_weather(self._manager, self.coordinates)
        logger.info(
            "Weather updated: %s, %.1fºC",
            self._current.description, self._current.temperature
        )

    def _advance(self) -> None:
        if self._elapsed % DESCRIPTION_EVERY == 0:
            self._showing = "desc"
        if self._elapsed % TEMPERATURE_EVERY == 0:
            self._showing = "temp"
        self._elapsed += TICK_SECONDS

    def render(self) -> str:
        if self._current is None or self._elapsed >= FETCH_EVERY:
            self._elapsed = 0
            try:
                self.fetch()
            except (PyOWMError, OSError) as e:
                logger.warning("Weather fetch failed: %s", e)
                if self._current is None:
                    return self.placeholder

        self._advance()

        if self._showing == "temp":
            return center(f"{self._current.temperature:.1f}ºC")
        return center(self._current.description)
