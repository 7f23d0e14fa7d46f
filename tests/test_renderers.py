"""
Tests for Line Renderers
========================

Covers the cadence gate and the three renderer styles:
- TrimLine: written once per change
- EndlessMarquee: leftward scroll wrapping into the pending line
- CycleMarquee: bounce across long lines, snap to fitting lines
"""

import pytest

from szb.display.renderers import (
    MARQUEE_TRAILER,
    RENDERER_STYLES,
    CycleMarquee,
    EndlessMarquee,
    TrimLine,
)

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def render(renderer, window: bytearray) -> bool:
    """Run one tick against a 20-byte window."""
    return renderer.next_render(memoryview(window))


def blank() -> bytearray:
    return bytearray(b"." * 20)


# =============================================================================
# Common Behaviour
# =============================================================================

class TestLineRenderer:
    """Behaviour shared by all renderers."""

    @pytest.mark.parametrize("cls", [TrimLine, EndlessMarquee, CycleMarquee])
    def test_no_line_no_write(self, cls):
        """Nothing is written before a line is set."""
        window = blank()
        assert render(cls(), window) is False
        assert window == blank()

    @pytest.mark.parametrize("cls", [TrimLine, EndlessMarquee, CycleMarquee])
    def test_first_set_becomes_current(self, cls):
        """The first line set is adopted immediately."""
        renderer = cls()
        renderer.set_current_line("hi")
        assert renderer.current == b"hi" + b" " * 18
        assert renderer.pos == 0
        assert renderer.dirty

    def test_invalid_rate(self):
        """Rates below one are rejected."""
        with pytest.raises(ValueError):
            EndlessMarquee(rate=0)

    def test_style_tags(self):
        """Tags map to their renderer classes."""
        assert RENDERER_STYLES == {
            "t": TrimLine,
            "em": EndlessMarquee,
            "cm": CycleMarquee,
        }

    def test_lines_are_glyph_mapped(self):
        """Lines are translated before rendering."""
        renderer = TrimLine()
        renderer.set_current_line("ア")
        window = blank()
        render(renderer, window)
        assert window[0] == 0xB1


# =============================================================================
# Trim
# =============================================================================

class TestTrimLine:
    """Tests for TrimLine."""

    def test_writes_first_20_bytes(self):
        """Long lines are cut at 20 bytes."""
        renderer = TrimLine()
        renderer.set_current_line(ALPHABET)
        window = blank()
        assert render(renderer, window)
        assert bytes(window) == ALPHABET[:20].encode()

    def test_written_once_per_change(self):
        """Further ticks leave the window alone."""
        renderer = TrimLine()
        renderer.set_current_line("hello")
        window = blank()
        assert render(renderer, window)
        window[:] = b"x" * 20
        assert render(renderer, window) is False
        assert window == b"x" * 20

    def test_new_line_is_shown_immediately(self):
        """Setting a new line replaces current and writes it on the next tick."""
        renderer = TrimLine()
        renderer.set_current_line("one")
        window = blank()
        render(renderer, window)
        renderer.set_current_line("two")
        assert renderer.current.startswith(b"two")
        assert render(renderer, window)
        assert bytes(window) == b"two" + b" " * 17


# =============================================================================
# Endless Marquee
# =============================================================================

class TestEndlessMarquee:
    """Tests for EndlessMarquee."""

    def test_trailer_on_long_lines(self):
        """Lines of 20 bytes or more get the separator appended."""
        renderer = EndlessMarquee()
        renderer.set_current_line(ALPHABET)
        assert renderer.current == ALPHABET.encode() + MARQUEE_TRAILER

    def test_no_trailer_on_short_lines(self):
        """Short lines are only padded."""
        renderer = EndlessMarquee()
        renderer.set_current_line("short")
        assert renderer.current == b"short" + b" " * 15

    def test_scrolls_left(self):
        """Each tick advances one byte."""
        renderer = EndlessMarquee()
        renderer.set_current_line(ALPHABET)
        window = blank()
        render(renderer, window)
        assert bytes(window) == b"ABCDEFGHIJKLMNOPQRST"
        render(renderer, window)
        assert bytes(window) == b"BCDEFGHIJKLMNOPQRSTU"

    def test_tail_fills_from_pending(self):
        """Near the end of the line the window continues with the pending head."""
        renderer = EndlessMarquee()
        renderer.set_current_line(ALPHABET)
        window = blank()
        for _ in range(10):
            render(renderer, window)
        # pos 9: "JKLMNOPQRSTUVWXYZ . " is exactly 20 bytes
        assert bytes(window) == b"JKLMNOPQRSTUVWXYZ . "
        render(renderer, window)
        assert bytes(window) == b"KLMNOPQRSTUVWXYZ . A"

    def test_cycle_closure(self):
        """With pending == current the window repeats after len(current) ticks."""
        renderer = EndlessMarquee()
        renderer.set_current_line(ALPHABET)
        length = len(renderer.current)
        window = blank()
        frames = []
        for _ in range(length + 1):
            render(renderer, window)
            frames.append(bytes(window))
        assert frames[length] == frames[0]
        assert renderer.pos == 1

    def test_pending_waits_for_exit(self):
        """A line set mid-scroll is adopted only after the current one exits."""
        renderer = EndlessMarquee()
        renderer.set_current_line(ALPHABET)
        window = blank()
        render(renderer, window)
        renderer.set_current_line("0123456789abcdefghijXYZ")
        assert renderer.current.startswith(b"ABC")

        render(renderer, window)
        assert bytes(window) == b"BCDEFGHIJKLMNOPQRSTU"

        remaining = len(renderer.current) - renderer.pos
        for _ in range(remaining):
            render(renderer, window)
        assert renderer.current.startswith(b"0123456789")
        assert renderer.pos == 0

    def test_rate_gate(self):
        """With rate 3 the scroll advances on ticks 1, 4 and 7."""
        renderer = EndlessMarquee(rate=3)
        renderer.set_current_line(ALPHABET)
        window = blank()
        written = [render(renderer, window) for _ in range(7)]
        assert written == [True, False, False, True, False, False, True]
        assert renderer.pos == 3


# =============================================================================
# Cycle Marquee
# =============================================================================

class TestCycleMarquee:
    """Tests for CycleMarquee."""

    def test_exact_fit_written_verbatim_then_stable(self):
        """A 20-byte line is shown once and then held."""
        renderer = CycleMarquee()
        renderer.set_current_line("exactly twenty bytes")
        window = blank()
        assert render(renderer, window)
        assert bytes(window) == b"exactly twenty bytes"
        window[:] = b"x" * 20
        for _ in range(5):
            assert render(renderer, window) is False
        assert window == b"x" * 20

    def test_short_line_padded_to_fit(self):
        """Short lines pad to exactly 20 bytes and behave like a fit."""
        renderer = CycleMarquee()
        renderer.set_current_line("hi")
        window = blank()
        assert render(renderer, window)
        assert bytes(window) == b"hi" + b" " * 18
        assert render(renderer, window) is False

    def test_bounce(self):
        """The window slides right to the end, then back to the start."""
        renderer = CycleMarquee()
        renderer.set_current_line("ABCDEFGHIJKLMNOPQRSTUV")  # 22 bytes
        window = blank()
        views = []
        for _ in range(7):
            render(renderer, window)
            views.append(bytes(window))
        assert views == [
            b"ABCDEFGHIJKLMNOPQRST",
            b"BCDEFGHIJKLMNOPQRSTU",
            b"CDEFGHIJKLMNOPQRSTUV",
            b"CDEFGHIJKLMNOPQRSTUV",
            b"BCDEFGHIJKLMNOPQRSTU",
            b"ABCDEFGHIJKLMNOPQRST",
            b"BCDEFGHIJKLMNOPQRSTU",
        ]

    def test_starts_sliding_left(self):
        """A new renderer moves the text left first."""
        assert CycleMarquee().slide_left

    def test_pending_adopted_at_start(self):
        """A long pending line replaces current when the window returns to 0."""
        renderer = CycleMarquee()
        renderer.set_current_line("ABCDEFGHIJKLMNOPQRSTU")  # 21 bytes
        window = blank()
        render(renderer, window)
        renderer.set_current_line("abcdefghijklmnopqrstuvwxyz")
        while renderer.current.startswith(b"ABC"):
            render(renderer, window)
        assert renderer.pos == 0
        assert renderer.slide_left
        render(renderer, window)
        assert bytes(window) == b"abcdefghijklmnopqrst"

    def test_fitting_pending_snaps(self):
        """A fitting pending line is shown on the next tick mid-bounce."""
        renderer = CycleMarquee()
        renderer.set_current_line(ALPHABET)
        window = blank()
        render(renderer, window)
        render(renderer, window)
        renderer.set_current_line("fits")
        assert render(renderer, window)
        assert bytes(window) == b"fits" + b" " * 16
        assert renderer.current == b"fits" + b" " * 16
        assert not renderer.dirty

    def test_long_pending_after_fitting_current(self):
        """A longer line set after a fitting one bounces from the start."""
        renderer = CycleMarquee()
        renderer.set_current_line("short")
        window = blank()
        assert render(renderer, window)
        assert bytes(window) == b"short" + b" " * 15

        renderer.set_current_line(ALPHABET)
        views = []
        for _ in range(20):
            assert render(renderer, window)
            views.append(bytes(window))
            assert renderer.current == ALPHABET.encode()
            assert 0 <= renderer.pos <= len(renderer.current) - 20

        assert views[0] == b"ABCDEFGHIJKLMNOPQRST"
        assert views[6] == b"GHIJKLMNOPQRSTUVWXYZ"
        assert all(len(v) == 20 and v.decode() in ALPHABET for v in views)

    def test_rate_gate(self):
        """With rate 2 every other tick is skipped."""
        renderer = CycleMarquee(rate=2)
        renderer.set_current_line(ALPHABET)
        window = blank()
        written = [render(renderer, window) for _ in range(4)]
        assert written == [True, False, True, False]
        assert renderer.pos == 2
