"""Exceptions raised while parsing or serializing OpusHead packets."""

from __future__ import annotations


class OpusHeaderError(ValueError):
    """Base class for all OpusHead codec errors."""


class ParseError(OpusHeaderError):
    """The input bytes do not form a valid OpusHead packet."""


class SerializeError(OpusHeaderError):
    """A Header could not be written to the destination buffer."""


class TruncatedInputError(ParseError):
    """A read needed more bytes than the input has left."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        """Initialize with the failed read position and sizes."""
        super().__init__(
            f"Truncated input at offset {offset}: needed {needed} bytes, {available} available"
        )
        self.offset = offset
        self.needed = needed
        self.available = available


class BufferTooSmallError(SerializeError):
    """A write needed more room than the destination buffer has left."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        """Initialize with the failed write position and sizes."""
        super().__init__(
            f"Buffer too small at offset {offset}: needed {needed} bytes, {available} available"
        )
        self.offset = offset
        self.needed = needed
        self.available = available


class BadMagicError(ParseError):
    """The packet does not start with the OpusHead tag."""


class InvalidStereoFlagError(ParseError):
    """A version 0 mapping entry has a stereo flag other than 0 or 1."""

    def __init__(self, index: int, flag: int) -> None:
        """Initialize with the offending mapping entry."""
        super().__init__(f"Invalid stereo flag {flag} in stream mapping entry {index}")
        self.index = index
        self.flag = flag


class TrailingDataError(ParseError):
    """A version 0 packet has bytes after the mapping table."""

    def __init__(self, expected: int, actual: int) -> None:
        """Initialize with the structural and actual packet lengths."""
        super().__init__(f"Expected {expected} bytes for version 0 header, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidHeaderError(SerializeError):
    """The Header fields are out of range or inconsistent with each other."""
