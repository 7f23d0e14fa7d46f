"""
Frame Geometry
==============

The target is a 20 column x 4 row HD44780-class display. The device
firmware copies the 80-byte frame straight into display RAM, where the
controller interleaves the rows: the second 20 bytes show up on the
third row and the third 20 bytes on the second row.

    frame bytes   [0, 20)  -> logical row 0
                  [20, 40) -> logical row 2
                  [40, 60) -> logical row 1
                  [60, 80) -> logical row 3

Composition applies this mapping exactly once, when a logical row is
written into its slot.
"""

from typing import Final

LINE_WIDTH: Final[int] = 20
LINE_COUNT: Final[int] = 4
FRAME_LEN: Final[int] = LINE_WIDTH * LINE_COUNT

# Byte offset of each logical row inside the frame
ROW_OFFSETS: Final[tuple[int, ...]] = (0, 40, 20, 60)


def row_slice(row: int) -> slice:
    """
    Return the frame slice holding a logical row.

    Args:
        row: Logical row index (0-3).

    Raises:
        IndexError: If row is outside 0-3.
    """
    if not 0 <= row < LINE_COUNT:
        raise IndexError(f"row must be 0-{LINE_COUNT - 1}, got {row}")
    start = ROW_OFFSETS[row]
    return slice(start, start + LINE_WIDTH)


def logical_rows(frame: bytes) -> list[bytes]:
    """Reassemble a frame into its four logical rows, top to bottom."""
    if len(frame) != FRAME_LEN:
        raise ValueError(f"frame must be {FRAME_LEN} bytes, got {len(frame)}")
    return [bytes(frame[row_slice(row)]) for row in range(LINE_COUNT)]
