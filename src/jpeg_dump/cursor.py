from __future__ import annotations
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from .errors import MalformedSegmentError, TruncatedSegmentError
from .trace import debug


class Cursor:
    """
    Sequential reader over a binary stream that keeps track of the absolute offset.

    While a segment is open (see ``segment``) reads may not cross the declared
    end of that segment.
    """
    def __init__(self, f: BinaryIO, offset: int = 0):
        self.f = f
        self.position = offset
        self.limit: Optional[int] = None

    def next_byte(self) -> Optional[int]:
        """Read one byte, None when the source is exhausted."""
        byte = self.f.read(1)
        if not byte:
            return None
        self.position += 1
        return byte[0]

    def read_bytes(self, count: int) -> bytes:
        if self.limit is not None and self.position + count > self.limit:
            raise MalformedSegmentError(
                f"Expecting {count} bytes but the segment ends after {self.limit - self.position}",
                self.position)
        data = self.f.read(count)
        if len(data) != count:
            raise TruncatedSegmentError(
                f"Expecting {count} bytes but {len(data)} was found", self.position)
        self.position += count
        return data

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u16(self) -> int:
        b = self.read_bytes(2)
        return (b[0] << 8) | b[1]

    def read_u24(self) -> int:
        b = self.read_bytes(3)
        return (b[0] << 16) | (b[1] << 8) | b[2]

    def read_u32(self) -> int:
        b = self.read_bytes(4)
        return (b[0] << 24) | (b[1] << 16) | (b[2] << 8) | b[3]

    def read_up_to(self, count: int) -> bytes:
        """Read at most count bytes, fewer if the open segment or the source ends first."""
        if self.limit is not None:
            count = min(count, self.limit - self.position)
        if count <= 0:
            return b""
        data = self.f.read(count)
        self.position += len(data)
        return data

    def skip(self, count: int) -> int:
        """Discard up to count bytes and return how many were actually there."""
        return len(self.read_up_to(count))

    @property
    def remaining(self) -> int:
        """Bytes left in the open segment."""
        if self.limit is None:
            raise RuntimeError("No segment is open")
        return self.limit - self.position

    @contextmanager
    def segment(self, size: int) -> Iterator[int]:
        """
        Bound reads to a segment whose size field (already read) was `size`.

        On normal exit the undecoded rest of the payload is skipped, so the
        cursor ends up `size - 2` bytes after the size field, or at the end
        of the source if that comes first.
        """
        if size < 2:
            raise MalformedSegmentError(f"Segment size {size} is smaller than its size field", self.position - 2)
        if self.limit is not None:
            raise RuntimeError("Segments cannot be nested")
        end = self.position + size - 2
        self.limit = end
        try:
            yield end
            left = end - self.position
            if self.skip(left) != left:
                debug(f"Source ended inside segment, expected {left} more payload bytes at {self.position}")
        finally:
            self.limit = None
