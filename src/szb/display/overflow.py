"""
Overflow Styles
===============

An overflow style decides how the four logical lines become one 80-byte
frame when their text does not fit.

- **PerLineStyle**: every logical row has its own line renderer
  (trim, endless marquee or cycle marquee).
- **WrapSpanLines**: line 1 is a single text stream of up to 80 bytes
  wrapped across all four rows; lines 2-4 cannot be set.

Both write into the frame through the controller's row mapping (see
``szb.display.layout``) and never clear it: bytes a style does not
write keep their previous value.
"""

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from szb.display.charmap import pad, translate
from szb.display.layout import FRAME_LEN, LINE_COUNT, LINE_WIDTH, row_slice
from szb.display.renderers import LineRenderer
from szb.errors import UnsupportedLineSetError

logger = logging.getLogger(__name__)


# =============================================================================
# Base Class
# =============================================================================

class OverflowStyle(ABC):
    """
    Abstract base class for frame composition policies.

    Lines are addressed by 0-based logical row.
    """

    @abstractmethod
    def set_line(self, row: int, line: str) -> None:
        """
        Set the text of one logical row.

        Raises:
            UnsupportedLineSetError: If this style does not own the row.
            IndexError: If row is outside 0-3.
        """
        pass

    @abstractmethod
    def next_render(self, frame: bytearray) -> None:
        """Compose one tick into frame, in place."""
        pass


# =============================================================================
# Per-Line Style
# =============================================================================

class PerLineStyle(OverflowStyle):
    """
    Delegate each logical row to its own line renderer.

    Example:
        >>> style = PerLineStyle([TrimLine(), EndlessMarquee(3), TrimLine(), TrimLine()])
        >>> style.set_line(0, "hello")
    """

    def __init__(self, renderers: Sequence[LineRenderer]):
        """
        Initialize with one renderer per logical row.

        Args:
            renderers: Exactly four renderers, for rows 0-3 in order.

        Raises:
            ValueError: If the number of renderers is not four.
        """
        if len(renderers) != LINE_COUNT:
            raise ValueError(
                f"expected {LINE_COUNT} line renderers, got {len(renderers)}"
            )
        self._renderers = tuple(renderers)

    @property
    def renderers(self) -> tuple[LineRenderer, ...]:
        """Line renderers for rows 0-3."""
        return self._renderers

    def set_line(self, row: int, line: str) -> None:
        if not 0 <= row < LINE_COUNT:
            raise IndexError(f"row must be 0-{LINE_COUNT - 1}, got {row}")
        self._renderers[row].set_current_line(line)

    def next_render(self, frame: bytearray) -> None:
        view = memoryview(frame)
        for row, renderer in enumerate(self._renderers):
            renderer.next_render(view[row_slice(row)])

    def __repr__(self) -> str:
        styles = ", ".join(repr(r) for r in self._renderers)
        return f"PerLineStyle([{styles}])"


# =============================================================================
# Wrap-Span Style
# =============================================================================

class WrapSpanLines(OverflowStyle):
    """
    Wrap one text stream across all four rows.

    The line is glyph-mapped and padded to 80 bytes once, when set. Text
    beyond 80 bytes is cut off. The frame is only written on the tick
    after a change.
    """

    def __init__(self) -> None:
        self._current = b""
        self._dirty = False

    @property
    def current(self) -> bytes:
        """The padded, glyph-mapped line."""
        return self._current

    @property
    def dirty(self) -> bool:
        """True if the line changed since the last composition."""
        return self._dirty

    def set_line(self, row: int, line: str) -> None:
        if row != 0:
            if not 0 <= row < LINE_COUNT:
                raise IndexError(f"row must be 0-{LINE_COUNT - 1}, got {row}")
            raise UnsupportedLineSetError(row + 1)
        self._current = pad(translate(line), FRAME_LEN)
        self._dirty = True

    def next_render(self, frame: bytearray) -> None:
        if not self._dirty:
            return

        for row in range(LINE_COUNT):
            start = row * LINE_WIDTH
            frame[row_slice(row)] = self._current[start:start + LINE_WIDTH]
        self._dirty = False

    def __repr__(self) -> str:
        return "WrapSpanLines()"
