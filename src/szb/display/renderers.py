"""
Line Renderers
==============

A line renderer owns a 20-byte viewport onto one logical line. Each
composition tick the overflow style hands it the line's slot in the
frame and the renderer decides whether to write it. When it does not
write, the slot keeps whatever it showed before, which is how slow
animations and static lines stay still on the display.

Styles
------
- **TrimLine** ("t"): shows the first 20 bytes, written once per change.
- **EndlessMarquee** ("em"): scrolls left forever; the tail of the line
  runs straight into the head of the next (or the same) line.
- **CycleMarquee** ("cm"): bounces left and right across a long line and
  snaps to lines that fit without scrolling.

Cadence
-------
Marquees take a rate N: after a visible step they stay put for N-1
ticks, so "em:5" advances once every five compositions. Rate 1 moves on
every tick.

Line Form
---------
Every line is glyph-mapped first and then right-padded with spaces to
at least 20 bytes. The endless marquee appends " . " to lines of 20
bytes or more so the seam between repetitions is visible.
"""

import logging
from abc import ABC, abstractmethod
from typing import Final

from szb.display.charmap import pad, translate
from szb.display.layout import LINE_WIDTH

logger = logging.getLogger(__name__)

# Separator appended to long endless-marquee lines
MARQUEE_TRAILER: Final[bytes] = b" . "


# =============================================================================
# Base Class
# =============================================================================

class LineRenderer(ABC):
    """
    Abstract base class for single-line renderers.

    Subclasses implement ``_render`` and may override
    ``set_current_line``. The base class handles the cadence gate.

    Attributes:
        rate: Ticks per visible step (1 = every tick)
    """

    #: Style tag used in configuration tokens
    tag: str = ""

    def __init__(self, rate: int = 1):
        """
        Initialize renderer state.

        Args:
            rate: Ticks per visible step, must be at least 1.

        Raises:
            ValueError: If rate is less than 1.
        """
        if rate < 1:
            raise ValueError(f"rate must be at least 1, got {rate}")
        self.rate = rate
        self._current = b""
        self._pending = b""
        self._pos = 0
        self._tick = 0
        self._rendered = False
        self._dirty = False

    @property
    def current(self) -> bytes:
        """Byte sequence being shown or animated."""
        return self._current

    @property
    def pending(self) -> bytes:
        """Byte sequence installed when the current animation completes."""
        return self._pending

    @property
    def pos(self) -> int:
        """Scroll position, a 0-based index into ``current``."""
        return self._pos

    @property
    def dirty(self) -> bool:
        """True if a line was set and not yet written."""
        return self._dirty

    def set_current_line(self, line: str) -> None:
        """
        Set the next line to display.

        The first line ever set becomes current immediately; later lines
        wait as pending until the renderer adopts them.

        Args:
            line: Text to display, any length.
        """
        self._pending = pad(self._encode(line), LINE_WIDTH)
        if not self._current:
            self._current = self._pending
            self._pos = 0
        self._dirty = True

    def next_render(self, window: memoryview) -> bool:
        """
        Advance one composition tick.

        Args:
            window: Writable 20-byte slot of the frame. Only valid for the
                    duration of this call.

        Returns:
            True if the window was written.
        """
        if not self._current:
            return False

        if self._rendered:
            self._tick += 1
            if self._tick < self.rate:
                return False

        self._tick = 0
        written = self._render(window)
        self._rendered = True
        return written

    def _encode(self, line: str) -> bytes:
        return translate(line)

    @abstractmethod
    def _render(self, window: memoryview) -> bool:
        """Write this tick's view into window, returning True if written."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rate={self.rate})"


# =============================================================================
# Trim
# =============================================================================

class TrimLine(LineRenderer):
    """
    Show the first 20 bytes of the line, without animation.

    The window is written once after each ``set_current_line`` and left
    alone afterwards.
    """

    tag = "t"

    def set_current_line(self, line: str) -> None:
        super().set_current_line(line)
        self._current = self._pending
        self._pos = 0

    def _render(self, window: memoryview) -> bool:
        if not self._dirty:
            return False
        window[:] = self._current[:LINE_WIDTH]
        self._dirty = False
        return True


# =============================================================================
# Endless Marquee
# =============================================================================

class EndlessMarquee(LineRenderer):
    """
    Scroll leftward forever.

    When the end of the current line enters the window, the gap is filled
    from the head of the pending line, and once the current line has fully
    scrolled out the pending line takes its place. A line set mid-scroll
    therefore only appears after the visible one exits, so the text never
    jumps. With no new line pending the current one wraps into itself.

    Example:
        >>> marquee = EndlessMarquee()
        >>> marquee.set_current_line("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        >>> frame = bytearray(20)
        >>> marquee.next_render(memoryview(frame))
        True
        >>> bytes(frame)
        b'ABCDEFGHIJKLMNOPQRST'
    """

    tag = "em"

    def _encode(self, line: str) -> bytes:
        data = translate(line)
        if len(data) >= LINE_WIDTH:
            data += MARQUEE_TRAILER
        return data

    def _render(self, window: memoryview) -> bool:
        end = min(self._pos + LINE_WIDTH, len(self._current))
        view = self._current[self._pos:end]
        if len(view) < LINE_WIDTH:
            view += self._pending[:LINE_WIDTH - len(view)]
        window[:] = view

        self._pos += 1
        if self._pos == len(self._current):
            self._current = self._pending
            self._pos = 0

        self._dirty = False
        return True


# =============================================================================
# Cycle Marquee
# =============================================================================

class CycleMarquee(LineRenderer):
    """
    Bounce back and forth across a long line.

    The window slides right one byte per step until the end of the line
    is visible, then slides back to the start, where the pending line is
    adopted. A pending line that fits exactly (20 bytes after padding) is
    shown immediately and then held without animation.
    """

    tag = "cm"

    def __init__(self, rate: int = 1):
        super().__init__(rate)
        self._slide_left = True

    @property
    def slide_left(self) -> bool:
        """True while the text moves left (the window advances right)."""
        return self._slide_left

    def _adopt_pending(self) -> None:
        self._current = self._pending
        self._pos = 0
        self._slide_left = True
        self._dirty = False

    def _render(self, window: memoryview) -> bool:
        if len(self._pending) == LINE_WIDTH:
            if not self._dirty:
                return False
            window[:] = self._pending
            self._adopt_pending()
            return True

        # Nothing to bounce across; move on to the longer pending line
        if len(self._current) <= LINE_WIDTH:
            self._adopt_pending()

        end = min(self._pos + LINE_WIDTH, len(self._current))
        window[:] = self._current[self._pos:end]

        if self._slide_left:
            if self._pos + LINE_WIDTH < len(self._current):
                self._pos += 1
            else:
                self._slide_left = False
        else:
            self._pos -= 1
            if self._pos == 0:
                self._adopt_pending()

        return True


# Style tag -> renderer class
RENDERER_STYLES: Final[dict[str, type[LineRenderer]]] = {
    cls.tag: cls for cls in (TrimLine, EndlessMarquee, CycleMarquee)
}
