"""
szb Display Composition
=======================

Turns four status lines into the 80-byte frame the LCD expects.

Module Structure
----------------
- **charmap**: UTF-8 to LCD ROM code substitution
- **layout**: frame size and the controller's row interleaving
- **renderers**: per-line renderers (trim, endless/cycle marquee)
- **overflow**: per-line and wrap-span composition styles
- **buffer**: the display buffer owning the frame
- **parser**: overflow style configuration tokens

Quick Start
-----------
    from szb.display import DisplayBuffer, parse_overflow_style

    buffer = DisplayBuffer(parse_overflow_style("t,em,em:3,t"))
    buffer.set_line_1("2026-10-18  12:00:00")
    buffer.set_line_2("a long line that will scroll across the display")
    frame = buffer.next_render()  # 80 bytes
"""

from szb.display.buffer import DisplayBuffer
from szb.display.charmap import CHAR_MAP, pad, rom_to_text, translate
from szb.display.layout import (
    FRAME_LEN,
    LINE_COUNT,
    LINE_WIDTH,
    ROW_OFFSETS,
    logical_rows,
    row_slice,
)
from szb.display.overflow import OverflowStyle, PerLineStyle, WrapSpanLines
from szb.display.parser import (
    WRAP_STYLE,
    parse_line_style,
    parse_line_styles,
    parse_overflow_style,
)
from szb.display.renderers import (
    MARQUEE_TRAILER,
    RENDERER_STYLES,
    CycleMarquee,
    EndlessMarquee,
    LineRenderer,
    TrimLine,
)

__all__ = [
    # Buffer
    "DisplayBuffer",
    # Glyph map
    "CHAR_MAP",
    "pad",
    "rom_to_text",
    "translate",
    # Geometry
    "FRAME_LEN",
    "LINE_COUNT",
    "LINE_WIDTH",
    "ROW_OFFSETS",
    "logical_rows",
    "row_slice",
    # Overflow styles
    "OverflowStyle",
    "PerLineStyle",
    "WrapSpanLines",
    # Parser
    "WRAP_STYLE",
    "parse_line_style",
    "parse_line_styles",
    "parse_overflow_style",
    # Line renderers
    "MARQUEE_TRAILER",
    "RENDERER_STYLES",
    "CycleMarquee",
    "EndlessMarquee",
    "LineRenderer",
    "TrimLine",
]
