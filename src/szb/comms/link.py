"""
LCD Device Link
===============

The device and host talk a tiny line-oriented protocol over the serial
port.

Device -> Host
--------------
The device prints the prompt token ``$>:`` whenever it is ready for a
new frame. Input is split on ASCII whitespace; any other token (boot
banners, debug output) is ignored.

Host -> Device
--------------
    display:<80 frame bytes>\\n     one frame, bytes may be 0x00-0xFF
    clr\\n                          clear the display (sent on teardown)

The frame payload is raw: it carries LCD ROM codes such as 0xA0-0xDF
and is not UTF-8.

Usage:
    port = open_serial_port('/dev/ttyACM0')
    link = DisplayLink(port)

    while running:
        if link.wait_for_prompt():
            link.send_frame(buffer.next_render())

    link.clear()
    close_serial_port(port)
"""

import logging
from typing import Final, Optional

import serial

from szb.display.layout import FRAME_LEN
from szb.errors import CommsError, LinkClosedError

logger = logging.getLogger(__name__)


# =============================================================================
# Protocol Constants
# =============================================================================

PROMPT_TOKEN: Final[bytes] = b"$>:"
FRAME_PREFIX: Final[bytes] = b"display:"
FRAME_SUFFIX: Final[bytes] = b"\n"
CLEAR_COMMAND: Final[bytes] = b"clr\n"

# Largest chunk pulled from the port per read
READ_CHUNK: Final[int] = 256

# Partial tokens longer than this are dropped as line noise
MAX_TOKEN_LENGTH: Final[int] = 1024

_WHITESPACE: Final[frozenset[int]] = frozenset(b" \t\n\r\x0b\x0c")


def encode_frame(frame: bytes) -> bytes:
    """
    Wrap an 80-byte frame in the display command.

    Raises:
        ValueError: If frame is not exactly 80 bytes.
    """
    if len(frame) != FRAME_LEN:
        raise ValueError(f"frame must be {FRAME_LEN} bytes, got {len(frame)}")
    return FRAME_PREFIX + bytes(frame) + FRAME_SUFFIX


class DisplayLink:
    """
    Host side of the LCD device protocol.

    Not thread-safe; use from the composing thread only.
    """

    def __init__(self, port: "serial.Serial"):
        """
        Initialize the link.

        Args:
            port: Opened serial port. Its read timeout bounds how long
                  ``read_token`` and ``wait_for_prompt`` block.
        """
        self.port = port
        self._buffer = bytearray()
        self._frames_sent = 0

    @property
    def frames_sent(self) -> int:
        """Number of frames written so far."""
        return self._frames_sent

    # -------------------------------------------------------------------------
    # Receiving
    # -------------------------------------------------------------------------

    def _pop_token(self) -> Optional[bytes]:
        """Remove and return the first whitespace-terminated token, if any."""
        data = bytes(self._buffer)
        stripped = data.lstrip()
        skipped = len(data) - len(stripped)

        for index, value in enumerate(stripped):
            if value in _WHITESPACE:
                del self._buffer[:skipped + index + 1]
                return stripped[:index]

        del self._buffer[:skipped]
        return None

    def read_token(self) -> Optional[bytes]:
        """
        Read the next whitespace-delimited token.

        Returns:
            The token, or None if the read timed out first. A prompt left
            unterminated in the buffer at a timeout is returned as a
            complete token, since the device does not always follow it
            with whitespace.

        Raises:
            LinkClosedError: If the port fails or is closed.
        """
        token = self._pop_token()
        if token is not None:
            return token

        while True:
            try:
                chunk = self.port.read(max(1, min(self.port.in_waiting, READ_CHUNK)))
            except (serial.SerialException, OSError) as e:
                raise LinkClosedError(f"Serial read failed: {e}") from e

            if not chunk:
                if self._buffer == PROMPT_TOKEN:
                    self._buffer.clear()
                    return PROMPT_TOKEN
                return None

            self._buffer.extend(chunk)
            token = self._pop_token()
            if token is not None:
                return token

            if len(self._buffer) > MAX_TOKEN_LENGTH:
                logger.debug("Dropping %d bytes of unterminated input", len(self._buffer))
                self._buffer.clear()

    def wait_for_prompt(self) -> bool:
        """
        Consume input until the prompt token arrives.

        Returns:
            True when a prompt was read, False if the read timed out first.
        """
        while True:
            token = self.read_token()
            if token is None:
                return False
            if token == PROMPT_TOKEN:
                logger.debug("Prompt received")
                return True
            logger.debug("Ignoring token: %r", token)

    # -------------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------------

    def _write(self, data: bytes) -> None:
        try:
            self.port.write(data)
            self.port.flush()
        except (serial.SerialException, OSError) as e:
            raise CommsError(f"Serial write failed: {e}") from e

    def send_frame(self, frame: bytes) -> None:
        """
        Send one 80-byte frame.

        Raises:
            ValueError: If frame is not 80 bytes.
            CommsError: If the write fails.
        """
        wire_bytes = encode_frame(frame)
        self._write(wire_bytes)
        self._frames_sent += 1
        logger.debug("Sent frame %d: %s", self._frames_sent, wire_bytes.hex())

    def clear(self) -> None:
        """Ask the device to clear its display."""
        self._write(CLEAR_COMMAND)
        logger.debug("Sent clear command")
