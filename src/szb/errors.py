"""
szb Error Hierarchy
===================

This module defines the exception hierarchy for the whole program.
All exceptions inherit from SzbError, allowing callers to catch every
szb-related error with a single except clause if desired.

Exception Hierarchy
-------------------
SzbError (base)
├── DisplayError (frame composition)
│   └── UnsupportedLineSetError - line cannot be set under this overflow style
├── ConfigError (configuration parsing)
│   ├── InvalidOverflowStyleError - style token does not have four fields
│   ├── InvalidStyleForLineError - unknown style tag for one line
│   ├── InvalidRateParameterError - ":N" suffix is not a positive integer
│   └── InvalidBaudRateError - serial baud rate is not a positive integer
├── CommsError (serial communication)
│   ├── ConnectionError - cannot open the serial port
│   └── LinkClosedError - the device stream ended
└── StatsError (statistics providers)

Design Philosophy
-----------------
Configuration errors are raised before the main loop starts so the
command-line tool can exit non-zero without touching the serial port.
Composition itself never raises: only the line setters can, and only
when the selected overflow style owns the requested line.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SzbError(Exception):
    """
    Base exception for all szb errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch all szb errors with a single except clause:

        try:
            style = parse_overflow_style(token)
        except SzbError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Display Exceptions
# =============================================================================

class DisplayError(SzbError):
    """Base exception for display composition errors."""
    pass


class UnsupportedLineSetError(DisplayError):
    """
    Setting this line is not supported by the active overflow style.

    Raised by set_line_2/3/4 when the wrap-span style is active, since
    that style owns all four rows jointly and only accepts line 1.

    Attributes:
        line: The 1-based line number that was rejected
    """

    def __init__(self, line: int, message: str = ""):
        self.line = line
        if not message:
            message = f"setting line {line} is not supported by this overflow style"
        super().__init__(message)


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigError(SzbError):
    """Base exception for configuration errors."""
    pass


class InvalidOverflowStyleError(ConfigError):
    """
    Overflow style token is malformed.

    The token must either be the literal "wrap" or contain exactly four
    comma-separated per-line styles (e.g. "t,em,em,cm:3").
    """

    def __init__(self, token: str, message: str = ""):
        self.token = token
        if not message:
            message = (
                f"cannot parse overflow style '{token}', please specify the "
                "style to use for the entire 4 lines (e.g. t,em,em,em)"
            )
        super().__init__(message)


class InvalidStyleForLineError(ConfigError):
    """
    Unknown style tag for one line.

    Attributes:
        index: 0-based position of the failing field in the token
        tag: The rejected style tag
    """

    def __init__(self, index: int, tag: str):
        self.index = index
        self.tag = tag
        super().__init__(f"invalid style '{tag}' for line{index}")


class InvalidRateParameterError(ConfigError):
    """
    Rate parameter is not a positive integer.

    Raised for marquee styles written as "em:N" or "cm:N" where N does
    not parse as an integer greater than zero.

    Attributes:
        value: The rejected rate text
        index: 0-based line position, when known
    """

    def __init__(self, value: str, index: Optional[int] = None):
        self.value = value
        self.index = index
        where = f" for line{index}" if index is not None else ""
        super().__init__(f"invalid rate parameter '{value}'{where}, expected a positive integer")


class InvalidBaudRateError(ConfigError):
    """
    Serial baud rate is not a positive integer.

    Attributes:
        baud_rate: The rejected value
    """

    def __init__(self, baud_rate: int):
        self.baud_rate = baud_rate
        super().__init__(f"invalid baud rate {baud_rate}, expected a positive integer")


# =============================================================================
# Communication Exceptions
# =============================================================================

class CommsError(SzbError):
    """Base exception for serial communication errors."""
    pass


class ConnectionError(CommsError):
    """
    Cannot connect to the display device.

    Raised when:
    - Serial port not found
    - Permission denied
    - Port busy
    """
    pass


class LinkClosedError(CommsError):
    """
    The device stream ended.

    Raised when a read returns end-of-stream instead of data, which
    happens when the device is unplugged or the port is closed under us.
    """
    pass


# =============================================================================
# Statistics Exceptions
# =============================================================================

class StatsError(SzbError):
    """
    A statistics provider cannot start.

    Raised at construction time only (missing API key, unknown timezone).
    Providers never raise from their string accessor.
    """
    pass
