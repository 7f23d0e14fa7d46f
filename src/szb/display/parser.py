"""
Overflow Style Parser
=====================

Parses the overflow style configuration token given on the command line.

Grammar
-------
    token     := "wrap" | line "," line "," line "," line
    line      := "t" | marquee [ ":" rate ]
    marquee   := "em" | "cm"
    rate      := positive integer

"wrap" selects the wrap-span style. Anything else must name the style of
all four lines, top to bottom:

    t,em,t,t        trim everything but line 2, which scrolls endlessly
    t,em:3,cm,t     line 2 scrolls every 3rd tick, line 3 bounces

Errors
------
- Not four fields: InvalidOverflowStyleError
- Unknown tag, or a rate on "t": InvalidStyleForLineError
- Rate not a positive integer: InvalidRateParameterError
"""

import logging
from typing import Final

from szb.display.layout import LINE_COUNT
from szb.display.overflow import OverflowStyle, PerLineStyle, WrapSpanLines
from szb.display.renderers import RENDERER_STYLES, LineRenderer, TrimLine
from szb.errors import (
    InvalidOverflowStyleError,
    InvalidRateParameterError,
    InvalidStyleForLineError,
)

logger = logging.getLogger(__name__)

WRAP_STYLE: Final[str] = "wrap"
DEFAULT_RATE: Final[int] = 1


def parse_rate(text: str, index: int) -> int:
    """
    Parse a marquee rate parameter.

    Raises:
        InvalidRateParameterError: If text is not a positive integer.
    """
    try:
        rate = int(text)
    except ValueError:
        raise InvalidRateParameterError(text, index) from None
    if rate < 1:
        raise InvalidRateParameterError(text, index)
    return rate


def parse_line_style(field: str, index: int) -> LineRenderer:
    """
    Parse a single line style field into a new renderer.

    Args:
        field: One comma-separated field, e.g. "em:3".
        index: 0-based line position, used in error messages.

    Returns:
        A fresh line renderer.
    """
    tag, sep, rate_text = field.strip().partition(":")
    renderer_cls = RENDERER_STYLES.get(tag)
    if renderer_cls is None:
        raise InvalidStyleForLineError(index, field)

    if renderer_cls is TrimLine:
        if sep:
            raise InvalidStyleForLineError(index, field)
        return TrimLine()

    rate = parse_rate(rate_text, index) if sep else DEFAULT_RATE
    return renderer_cls(rate=rate)


def parse_line_styles(token: str) -> tuple[LineRenderer, ...]:
    """
    Parse a four-field token into one renderer per line.

    Args:
        token: Comma-separated styles, e.g. "t,em,em,cm:5".

    Returns:
        Tuple of four renderers for lines 1-4.

    Raises:
        InvalidOverflowStyleError: If the token does not have four fields.
        InvalidStyleForLineError: If a field names an unknown style.
        InvalidRateParameterError: If a rate is not a positive integer.
    """
    fields = token.split(",")
    if len(fields) != LINE_COUNT:
        raise InvalidOverflowStyleError(token)

    renderers = tuple(
        parse_line_style(field, index) for index, field in enumerate(fields)
    )
    logger.debug("Parsed line styles %r -> %r", token, renderers)
    return renderers


def parse_overflow_style(token: str) -> OverflowStyle:
    """
    Parse a configuration token into an overflow style.

    Args:
        token: "wrap" or four comma-separated line styles.

    Returns:
        WrapSpanLines for "wrap", otherwise a PerLineStyle.
    """
    if token.strip() == WRAP_STYLE:
        return WrapSpanLines()
    return PerLineStyle(parse_line_styles(token))
