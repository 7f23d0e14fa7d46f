"""
LCD Character Map
=================

HD44780-compatible controllers ship with the A00 character ROM, which
holds ASCII in 0x20-0x7D and JIS X 0201 katakana in 0xA1-0xDF. Host
programs author their status lines in UTF-8, so before a line reaches
the frame every designated multi-byte sequence is replaced by its
single ROM byte.

Two groups of keys are recognised:

- Full-width katakana and a handful of symbols (「 」 ” º), mapped to
  their closest ROM glyph.
- The half-width katakana block U+FF61-U+FF9F, which lines up one to one
  with ROM codes 0xA1-0xDF.

Everything else passes through byte for byte. Since all outputs are
single bytes in 0xA0-0xDF and no key is a single byte, applying the map
twice gives the same result as applying it once.

Example:
    >>> translate("ア「テ」")
    b'\\xb1\\xa2\\xc3\\xa3'
"""

import re
from typing import Final, Union

# =============================================================================
# Character Map
# =============================================================================

# Full-width sources keyed by their ROM code
_FULL_WIDTH_GLYPHS: Final[dict[str, int]] = {
    "「": 0xA2,
    "」": 0xA3,
    "ヲ": 0xA6,
    "ァ": 0xA7, "ィ": 0xA8, "ゥ": 0xA9, "ェ": 0xAA, "ォ": 0xAB,
    "ャ": 0xAC, "ュ": 0xAD, "ョ": 0xAE, "ッ": 0xAF,
    "ア": 0xB1, "イ": 0xB2, "ウ": 0xB3, "エ": 0xB4, "オ": 0xB5,
    "カ": 0xB6, "キ": 0xB7, "ク": 0xB8, "ケ": 0xB9, "コ": 0xBA,
    "サ": 0xBB, "シ": 0xBC, "ス": 0xBD, "セ": 0xBE, "ソ": 0xBF,
    "タ": 0xC0, "チ": 0xC1, "ツ": 0xC2, "テ": 0xC3, "ト": 0xC4,
    "ナ": 0xC5, "ニ": 0xC6, "ヌ": 0xC7, "ネ": 0xC8, "ノ": 0xC9,
    "ハ": 0xCA, "ヒ": 0xCB, "フ": 0xCC, "ヘ": 0xCD, "ホ": 0xCE,
    "マ": 0xCF, "ミ": 0xD0, "ム": 0xD1, "メ": 0xD2, "モ": 0xD3,
    "ヤ": 0xD4, "ユ": 0xD5, "ヨ": 0xD6,
    "ラ": 0xD7, "リ": 0xD8, "ル": 0xD9, "レ": 0xDA, "ロ": 0xDB,
    "ワ": 0xDC, "ン": 0xDD,
    "”": 0xDE,  # dakuten
    "º": 0xDF,  # handakuten, also used as the degree sign
}

# Half-width katakana U+FF61..U+FF9F occupy ROM codes 0xA1..0xDF in order
HALF_WIDTH_FIRST: Final[int] = 0xFF61
HALF_WIDTH_LAST: Final[int] = 0xFF9F
ROM_KATAKANA_FIRST: Final[int] = 0xA1


def _build_char_map() -> dict[bytes, bytes]:
    char_map = {
        key.encode("utf-8"): bytes([code])
        for key, code in _FULL_WIDTH_GLYPHS.items()
    }
    for codepoint in range(HALF_WIDTH_FIRST, HALF_WIDTH_LAST + 1):
        key = chr(codepoint).encode("utf-8")
        char_map[key] = bytes([ROM_KATAKANA_FIRST + codepoint - HALF_WIDTH_FIRST])
    return char_map


CHAR_MAP: Final[dict[bytes, bytes]] = _build_char_map()

# Longest keys first so the alternation never stops at a shorter match
_CHAR_MAP_PATTERN = re.compile(
    b"|".join(re.escape(k) for k in sorted(CHAR_MAP, key=len, reverse=True))
)


# =============================================================================
# Translation
# =============================================================================

def translate(text: Union[str, bytes]) -> bytes:
    """
    Replace mapped sequences with their LCD ROM codes.

    Substitution is a single left-to-right pass over non-overlapping
    occurrences. Unmapped bytes are copied unchanged.

    Args:
        text: A str (encoded as UTF-8 first) or raw bytes.

    Returns:
        The translated byte string.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    return _CHAR_MAP_PATTERN.sub(lambda m: CHAR_MAP[m.group(0)], data)


def pad(data: bytes, width: int) -> bytes:
    """Right-pad with ASCII spaces to at least ``width`` bytes."""
    return data.ljust(width, b" ")


def rom_to_text(data: bytes, unknown: str = "?") -> str:
    """
    Approximate how LCD ROM bytes will look, for terminal previews.

    Printable ASCII is kept, ROM katakana become half-width katakana and
    anything else is shown as ``unknown``.
    """
    chars = []
    for value in data:
        if 0x20 <= value <= 0x7E:
            chars.append(chr(value))
        elif ROM_KATAKANA_FIRST <= value <= 0xDF:
            chars.append(chr(HALF_WIDTH_FIRST + value - ROM_KATAKANA_FIRST))
        else:
            chars.append(unknown)
    return "".join(chars)
