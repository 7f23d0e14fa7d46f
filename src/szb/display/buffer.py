"""
Display Buffer
==============

The display buffer owns the single 80-byte frame sent to the device and
the overflow style that composes it.

The frame starts out blank (ASCII spaces) and is never cleared between
renders. Each style writes only the rows it wants to change; everything
else keeps its previous content, matching what the controller itself
retains between frames.

Example:
    >>> buffer = DisplayBuffer(WrapSpanLines())
    >>> buffer.set_line_1("hello")
    >>> frame = buffer.next_render()
    >>> frame[:20]
    b'hello               '
"""

import logging

from szb.display.layout import FRAME_LEN
from szb.display.overflow import OverflowStyle

logger = logging.getLogger(__name__)


class DisplayBuffer:
    """
    Frame memory plus the overflow style composing into it.

    Setters observed before ``next_render`` are reflected in that render;
    later ones wait for the next.
    """

    def __init__(self, style: OverflowStyle):
        """
        Initialize the buffer.

        Args:
            style: Overflow style that composes the frame.
        """
        self._style = style
        self._frame = bytearray(b" " * FRAME_LEN)

    @property
    def style(self) -> OverflowStyle:
        """Active overflow style."""
        return self._style

    def set_line_1(self, line: str) -> None:
        """Set line 1. Supported by every overflow style."""
        self._style.set_line(0, line)

    def set_line_2(self, line: str) -> None:
        """
        Set line 2.

        Raises:
            UnsupportedLineSetError: Under the wrap-span style.
        """
        self._style.set_line(1, line)

    def set_line_3(self, line: str) -> None:
        """
        Set line 3.

        Raises:
            UnsupportedLineSetError: Under the wrap-span style.
        """
        self._style.set_line(2, line)

    def set_line_4(self, line: str) -> None:
        """
        Set line 4.

        Raises:
            UnsupportedLineSetError: Under the wrap-span style.
        """
        self._style.set_line(3, line)

    def set_line(self, number: int, line: str) -> None:
        """
        Set a line by its 1-based number.

        Raises:
            UnsupportedLineSetError: If the style does not own the line.
            IndexError: If number is outside 1-4.
        """
        if not 1 <= number <= 4:
            raise IndexError(f"line number must be 1-4, got {number}")
        self._style.set_line(number - 1, line)

    def next_render(self) -> bytes:
        """
        Compose one tick and return the frame.

        Returns:
            Snapshot of the 80-byte frame.
        """
        self._style.next_render(self._frame)
        return bytes(self._frame)
