"""
Serial Port Utilities for the LCD Board
=======================================

The LCD hangs off a microcontroller board (a Pico, an Arduino or a
USB-serial bridge) that shows up as a USB CDC or UART device. This
module finds that board and opens it 8N1 without flow control; the
``$>:`` prompt paces the host, so no handshaking is needed.

Any baud rate the board firmware uses is accepted. 115200 is the
default.
"""

import logging
from dataclasses import dataclass
from typing import Final, Optional

import serial
import serial.tools.list_ports

from szb.errors import ConnectionError, InvalidBaudRateError

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_BAUD_RATE: Final[int] = 115200

# Fallback device when nothing is specified and auto-detection fails
DEFAULT_DEVICE: Final[str] = "/dev/ttyACM0"

# Read timeout in seconds; short so the main loop can notice shutdown
DEFAULT_TIMEOUT: Final[float] = 1.0

# USB vendor IDs of boards that commonly drive character LCDs, in
# auto-detection priority order
BOARD_VENDORS: Final[dict[int, str]] = {
    0x2E8A: "Raspberry Pi",  # RP2040 (Pico)
    0x2341: "Arduino",
    0x1A86: "CH340",
    0x10C4: "CP210x",
    0x0403: "FTDI",
}


# =============================================================================
# Port Discovery
# =============================================================================

@dataclass(frozen=True)
class PortInfo:
    """
    A serial port seen on the system.

    Attributes:
        device: Device path (e.g., '/dev/ttyACM0', 'COM3')
        description: Driver description, may be empty
        vid: USB vendor ID, None for non-USB ports
    """

    device: str
    description: str = ""
    vid: Optional[int] = None

    @property
    def board(self) -> Optional[str]:
        """Name of a known LCD board vendor, if any."""
        return BOARD_VENDORS.get(self.vid) if self.vid is not None else None

    def __str__(self) -> str:
        text = self.device
        if self.description:
            text += f" - {self.description}"
        if self.board:
            text += f" [{self.board}]"
        return text


def list_serial_ports() -> list[PortInfo]:
    """List the serial ports pyserial can see."""
    ports = [
        PortInfo(p.device, p.description or "", p.vid)
        for p in serial.tools.list_ports.comports()
    ]
    logger.debug("Found %d serial ports", len(ports))
    return ports


def find_display_port() -> Optional[str]:
    """
    Guess which port the LCD board is on.

    Boards from BOARD_VENDORS win, in table order; otherwise the first
    USB port is used.

    Returns:
        Device path, or None if no USB port is present.
    """
    usb_ports = [p for p in list_serial_ports() if p.vid is not None]
    if not usb_ports:
        return None

    ranked = sorted(
        usb_ports,
        key=lambda p: list(BOARD_VENDORS).index(p.vid) if p.board else len(BOARD_VENDORS),
    )
    logger.info("Auto-detected port: %s", ranked[0])
    return ranked[0].device


def format_port_list(ports: list[PortInfo]) -> str:
    """One indented line per port."""
    if not ports:
        return "No serial ports found."
    return "\n".join(f"  {port}" for port in ports)


# =============================================================================
# Open / Close
# =============================================================================

def open_serial_port(
    device: str,
    baud_rate: int = DEFAULT_BAUD_RATE,
    timeout: float = DEFAULT_TIMEOUT,
) -> serial.Serial:
    """
    Open the LCD board's serial port, 8N1 with no flow control.

    Raises:
        InvalidBaudRateError: If baud_rate is not positive.
        ConnectionError: If the port cannot be opened.
    """
    if baud_rate < 1:
        raise InvalidBaudRateError(baud_rate)

    logger.info("Opening %s at %d baud", device, baud_rate)
    try:
        port = serial.Serial(
            port=device,
            baudrate=baud_rate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=timeout,
            xonxoff=False,
            rtscts=False,
            dsrdtr=False,
        )
    except serial.SerialException as e:
        hint = "run 'szb ports' to list available ports"
        if "Permission denied" in str(e):
            hint = "add your user to the 'dialout' group"
        raise ConnectionError(f"Cannot open {device}: {e} ({hint})") from e

    port.reset_input_buffer()
    return port


def close_serial_port(port: Optional[serial.Serial]) -> None:
    """Flush and close the port; errors are logged so teardown completes."""
    if port is None or not port.is_open:
        return
    try:
        port.flush()
        port.close()
        logger.info("Serial port closed")
    except (serial.SerialException, OSError) as e:
        logger.warning("Error closing serial port: %s", e)
