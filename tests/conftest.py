"""
Shared test fixtures.
"""

from unittest.mock import Mock

import pytest

from szb.display.layout import logical_rows


class FakePort:
    """
    Scripted stand-in for serial.Serial.

    Each read returns the next scripted chunk; an empty chunk (or running
    out of script) behaves like a read timeout. Writes are collected.
    """

    def __init__(self, chunks=()):
        self.chunks = list(chunks)
        self.written = bytearray()
        self.is_open = True
        self.flush = Mock()
        self.close = Mock(side_effect=self._close)

    def _close(self):
        self.is_open = False

    @property
    def in_waiting(self) -> int:
        if self.chunks and isinstance(self.chunks[0], bytes):
            return len(self.chunks[0])
        return 0

    def read(self, size: int = 1) -> bytes:
        if not self.chunks:
            return b""
        chunk = self.chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def write(self, data: bytes) -> int:
        self.written.extend(data)
        return len(data)


@pytest.fixture
def fake_port():
    """Factory for FakePort instances."""
    return FakePort


@pytest.fixture
def rows():
    """Split a frame into its logical rows."""
    return logical_rows
