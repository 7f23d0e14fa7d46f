"""
szb Communication Module
========================

Serial communication with the microcontroller driving the LCD.

Module Structure
----------------
- **serial**: Serial port utilities (detection, configuration)
- **link**: Prompt scanning and frame transmission

Quick Start
-----------
    from szb.comms import DisplayLink, open_serial_port, close_serial_port

    port = open_serial_port('/dev/ttyACM0', baud_rate=115200)
    link = DisplayLink(port)
    try:
        if link.wait_for_prompt():
            link.send_frame(frame)
    finally:
        link.clear()
        close_serial_port(port)

Error Handling
--------------
All communication errors inherit from `CommsError`:

- `ConnectionError`: Cannot open the serial port
- `InvalidBaudRateError`: Baud rate is not positive (a `ConfigError`)
- `LinkClosedError`: The port failed or closed while reading

These exceptions are defined in `szb.errors`.

Thread Safety
-------------
The communication classes are NOT thread-safe. Use only from the thread
that composes frames.
"""

from szb.comms.link import (
    CLEAR_COMMAND,
    FRAME_PREFIX,
    FRAME_SUFFIX,
    PROMPT_TOKEN,
    DisplayLink,
    encode_frame,
)
from szb.comms.serial import (
    DEFAULT_BAUD_RATE,
    DEFAULT_DEVICE,
    DEFAULT_TIMEOUT,
    BOARD_VENDORS,
    PortInfo,
    close_serial_port,
    find_display_port,
    format_port_list,
    list_serial_ports,
    open_serial_port,
)

__all__ = [
    # Link protocol
    "CLEAR_COMMAND",
    "FRAME_PREFIX",
    "FRAME_SUFFIX",
    "PROMPT_TOKEN",
    "DisplayLink",
    "encode_frame",
    # Serial utilities
    "DEFAULT_BAUD_RATE",
    "DEFAULT_DEVICE",
    "DEFAULT_TIMEOUT",
    "BOARD_VENDORS",
    "PortInfo",
    "close_serial_port",
    "find_display_port",
    "format_port_list",
    "list_serial_ports",
    "open_serial_port",
]
