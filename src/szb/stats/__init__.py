"""
szb Status Line Providers
=========================

Sources for the four status lines. Each provider is read with ``str()``
once per composed frame.

Module Structure
----------------
- **clock**: date/time with periodic day-of-week
- **aggregates**: memory, CPU and uptime (psutil)
- **network**: interface addresses (psutil)
- **weather**: OpenWeatherMap current weather
- **humanreadable**: size and duration formatting
- **provider**: background refresh base class
"""

from szb.stats.aggregates import Aggregates, cpu_usage
from szb.stats.clock import DEFAULT_TIMEZONE, DateTime, load_timezone
from szb.stats.humanreadable import bibytes, duration, si_bytes
from szb.stats.network import NetworkStats, format_address, format_interfaces
from szb.stats.provider import StatsProvider
from szb.stats.weather import (
    Coordinates,
    CurrentWeather,
    WeatherStats,
    center,
    fetch_current_weather,
)

__all__ = [
    "Aggregates",
    "cpu_usage",
    "DEFAULT_TIMEZONE",
    "DateTime",
    "load_timezone",
    "bibytes",
    "duration",
    "si_bytes",
    "NetworkStats",
    "format_address",
    "format_interfaces",
    "StatsProvider",
    "Coordinates",
    "CurrentWeather",
    "WeatherStats",
    "center",
    "fetch_current_weather",
]
