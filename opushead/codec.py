"""Conversion between OpusHead packets and Header objects."""

from __future__ import annotations

import logging

from .cursor import ReadCursor, WriteCursor
from .errors import (
    BadMagicError,
    InvalidStereoFlagError,
    ParseError,
    TrailingDataError,
    TruncatedInputError,
)
from .models import EMITTED_VERSION, OPUS_HEAD_MAGIC, Header
from .models.types import MonoStream, StereoStream

logger = logging.getLogger(__name__)


def is_opus_head(data: bytes | bytearray | memoryview) -> bool:
    """Return whether ``data`` starts with the OpusHead tag."""
    return bytes(data[: len(OPUS_HEAD_MAGIC)]) == OPUS_HEAD_MAGIC


def parse(data: bytes | bytearray | memoryview) -> Header:
    """
    Parse an OpusHead packet.

    Args:
        data: The complete identification packet.

    Returns:
        A new Header holding the decoded fields.

    Raises:
        BadMagicError: If the packet does not start with the OpusHead tag.
        TruncatedInputError: If the packet ends before the structure does.
        InvalidStereoFlagError: If a version 0 mapping entry has a stereo flag
            other than 0 or 1.
        TrailingDataError: If a version 0 packet has bytes after the mapping table.
    """
    try:
        return _parse(ReadCursor(data))
    except ParseError as err:
        logger.debug("Rejected OpusHead packet of %s bytes: %s", len(data), err)
        raise


def _parse(cursor: ReadCursor) -> Header:
    try:
        magic = cursor.read_bytes(len(OPUS_HEAD_MAGIC))
    except TruncatedInputError:
        # A short prefix of the tag is a truncated OpusHead, anything else is
        # a different stream type.
        head = cursor.read_bytes(cursor.remaining)
        if not OPUS_HEAD_MAGIC.startswith(head):
            raise BadMagicError(f"Expected {OPUS_HEAD_MAGIC!r} tag, got {head!r}") from None
        raise
    if magic != OPUS_HEAD_MAGIC:
        raise BadMagicError(f"Expected {OPUS_HEAD_MAGIC!r} tag, got {magic!r}")

    version = cursor.read_u8()
    input_sample_rate = cursor.read_u32()
    channel_mapping_family = cursor.read_u8()
    channel_count = cursor.read_u8()
    pre_skip = cursor.read_u16()

    stream_mapping: tuple[MonoStream | StereoStream, ...] | None = None
    if channel_mapping_family != 0:
        stream_count = cursor.read_u8()
        entries: list[MonoStream | StereoStream] = []
        for index in range(stream_count):
            flag = cursor.read_u8()
            # Flags above 1 are undefined for version 0
            if version == 0 and flag > 1:
                raise InvalidStereoFlagError(index, flag)
            left = cursor.read_u8()
            if flag == StereoStream.stereo_flag:
                entries.append(StereoStream(left=left, right=cursor.read_u8()))
            else:
                entries.append(MonoStream(left=left))
        stream_mapping = tuple(entries)

    # Later versions may append fields this codec does not interpret.
    if version == 0 and cursor.remaining:
        raise TrailingDataError(cursor.offset, cursor.capacity)

    return Header(
        version=version,
        input_sample_rate=input_sample_rate,
        channel_mapping_family=channel_mapping_family,
        channel_count=channel_count,
        pre_skip=pre_skip,
        stream_mapping=stream_mapping,
    )


def serialize(header: Header, buffer: bytearray | memoryview) -> int:
    """
    Write ``header`` into ``buffer`` as a version 0 OpusHead packet.

    The version byte is always written as 0, whatever ``header.version`` holds.

    Args:
        header: Header to write.
        buffer: Writable destination, its length is the available capacity.

    Returns:
        Number of bytes written.

    Raises:
        InvalidHeaderError: If the header fields are out of range or inconsistent.
        BufferTooSmallError: If ``buffer`` cannot hold the whole packet. Bytes
            already written to ``buffer`` must not be used in that case.
    """
    header.validate()
    cursor = WriteCursor(buffer)
    cursor.write_bytes(OPUS_HEAD_MAGIC)
    cursor.write_u8(EMITTED_VERSION)
    cursor.write_u32(header.input_sample_rate)
    cursor.write_u8(header.channel_mapping_family)
    cursor.write_u8(header.channel_count)
    cursor.write_u16(header.pre_skip)

    if header.has_mapping_table:
        assert header.stream_mapping is not None  # checked by validate()
        cursor.write_u8(len(header.stream_mapping))
        for entry in header.stream_mapping:
            cursor.write_u8(entry.stereo_flag)
            cursor.write_u8(entry.left)
            if isinstance(entry, StereoStream):
                cursor.write_u8(entry.right)

    return cursor.offset


def header_to_packet(header: Header) -> bytes:
    """Return ``header`` serialized as a complete OpusHead packet."""
    # packet_size assumes every entry is a MonoStream or StereoStream
    header.validate()
    buffer = bytearray(header.packet_size)
    written = serialize(header, buffer)
    return bytes(buffer[:written])
