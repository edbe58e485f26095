"""Bounded sequential cursors over byte buffers.

Every field of an OpusHead packet is read or written through one of these
cursors. Each access checks the remaining capacity first, so no operation ever
touches memory past the declared buffer length, and a failed access leaves
both the buffer and the offset untouched.
"""

from __future__ import annotations

import struct

from .errors import BufferTooSmallError, TruncatedInputError

U16 = struct.Struct("<H")
U32 = struct.Struct("<I")


def _check_width(value: int, bits: int) -> None:
    if not 0 <= value < 1 << bits:
        raise ValueError(f"Value {value} does not fit in {bits} bits")


class ReadCursor:
    """Read-only cursor over an immutable byte buffer."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        """Initialize the cursor at offset 0 of ``data``."""
        view = memoryview(data)
        if not view.c_contiguous:
            view = memoryview(view.tobytes())
        self._data = view.cast("B")
        self.capacity = len(self._data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        """Number of bytes left to read."""
        return self.capacity - self.offset

    def _claim(self, width: int) -> int:
        """Reserve ``width`` bytes and return the offset they start at."""
        if self.remaining < width:
            raise TruncatedInputError(self.offset, width, self.remaining)
        start = self.offset
        self.offset += width
        return start

    def read_u8(self) -> int:
        """Read one unsigned byte."""
        return self._data[self._claim(1)]

    def read_u16(self) -> int:
        """Read a little-endian unsigned 16-bit integer."""
        return U16.unpack_from(self._data, self._claim(U16.size))[0]

    def read_u32(self) -> int:
        """Read a little-endian unsigned 32-bit integer."""
        return U32.unpack_from(self._data, self._claim(U32.size))[0]

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` raw bytes."""
        start = self._claim(count)
        return self._data[start : start + count].tobytes()


class WriteCursor:
    """Write-only cursor over a mutable, fixed-capacity byte buffer."""

    def __init__(self, buffer: bytearray | memoryview) -> None:
        """Initialize the cursor at offset 0 of ``buffer``."""
        view = memoryview(buffer)
        if view.readonly:
            raise TypeError("WriteCursor requires a writable buffer")
        if not view.c_contiguous:
            raise TypeError("WriteCursor requires a contiguous buffer")
        self._buffer = view.cast("B")
        self.capacity = len(self._buffer)
        self.offset = 0

    @property
    def remaining(self) -> int:
        """Number of bytes that can still be written."""
        return self.capacity - self.offset

    def _claim(self, width: int) -> int:
        if self.remaining < width:
            raise BufferTooSmallError(self.offset, width, self.remaining)
        start = self.offset
        self.offset += width
        return start

    def write_u8(self, value: int) -> None:
        """Write one unsigned byte."""
        _check_width(value, 8)
        self._buffer[self._claim(1)] = value

    def write_u16(self, value: int) -> None:
        """Write a little-endian unsigned 16-bit integer."""
        _check_width(value, 16)
        packed = U16.pack(value)
        start = self._claim(U16.size)
        self._buffer[start : start + U16.size] = packed

    def write_u32(self, value: int) -> None:
        """Write a little-endian unsigned 32-bit integer."""
        _check_width(value, 32)
        packed = U32.pack(value)
        start = self._claim(U32.size)
        self._buffer[start : start + U32.size] = packed

    def write_bytes(self, data: bytes) -> None:
        """Write ``data`` verbatim."""
        start = self._claim(len(data))
        self._buffer[start : start + len(data)] = data
