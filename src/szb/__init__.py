"""
szb - Status Display for 4x20 Character LCDs
============================================

This package drives an HD44780-compatible 4-line by 20-column character
LCD attached through a microcontroller on a USB serial port. The device
asks for content by printing a ``$>:`` prompt; the host answers with an
80-byte frame built from four status lines (clock, weather, system
aggregates, network addresses).

The LCD controller does not lay out its 80 cells row by row: bytes
[0, 20) show on row 0, [40, 60) on row 1, [20, 40) on row 2 and [60, 80)
on row 3. Frames are composed with that interleaving applied.

Main Components
---------------
- **display**: frame composition
    Glyph translation, line renderers (trim and marquees), overflow
    styles and the display buffer

- **comms**: serial communication
    Port detection and the prompt/frame protocol

- **stats**: status line providers
    Clock, weather, CPU/memory/uptime and network lines

- **kickstart**: init/loop/teardown lifecycle with signal handling

Quick Start
-----------
Compose a frame:
    >>> from szb.display import DisplayBuffer, parse_overflow_style
    >>> buffer = DisplayBuffer(parse_overflow_style("t,em,em,t"))
    >>> buffer.set_line_1("hello")
    >>> frame = buffer.next_render()
    >>> len(frame)
    80

Or use the command-line tool:
    $ szb ports
    $ szb run -o t,em,em:3,t
    $ szb preview -o wrap

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from szb.display import (
    DisplayBuffer,
    PerLineStyle,
    WrapSpanLines,
    parse_overflow_style,
    translate,
)
from szb.errors import (
    SzbError,
    DisplayError,
    UnsupportedLineSetError,
    ConfigError,
    InvalidOverflowStyleError,
    InvalidStyleForLineError,
    InvalidRateParameterError,
    InvalidBaudRateError,
    CommsError,
    ConnectionError,
    LinkClosedError,
    StatsError,
)

__all__ = [
    "__version__",
    # Display
    "DisplayBuffer",
    "PerLineStyle",
    "WrapSpanLines",
    "parse_overflow_style",
    "translate",
    # Errors
    "SzbError",
    "DisplayError",
    "UnsupportedLineSetError",
    "ConfigError",
    "InvalidOverflowStyleError",
    "InvalidStyleForLineError",
    "InvalidRateParameterError",
    "InvalidBaudRateError",
    "CommsError",
    "ConnectionError",
    "LinkClosedError",
    "StatsError",
]
