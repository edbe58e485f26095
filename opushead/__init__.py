"""opushead: OpusHead identification header codec."""

from __future__ import annotations

from opushead.codec import header_to_packet, is_opus_head, parse, serialize
from opushead.errors import (
    BadMagicError,
    BufferTooSmallError,
    InvalidHeaderError,
    InvalidStereoFlagError,
    OpusHeaderError,
    ParseError,
    SerializeError,
    TrailingDataError,
    TruncatedInputError,
)
from opushead.models import (
    OPUS_HEAD_MAGIC,
    OPUS_HEAD_MAX_SIZE,
    OPUS_HEAD_MIN_SIZE,
    ChannelMappingFamily,
    Header,
    MonoStream,
    StereoStream,
    StreamMapping,
)

__all__ = [
    "OPUS_HEAD_MAGIC",
    "OPUS_HEAD_MAX_SIZE",
    "OPUS_HEAD_MIN_SIZE",
    "BadMagicError",
    "BufferTooSmallError",
    "ChannelMappingFamily",
    "Header",
    "InvalidHeaderError",
    "InvalidStereoFlagError",
    "MonoStream",
    "OpusHeaderError",
    "ParseError",
    "SerializeError",
    "StereoStream",
    "StreamMapping",
    "TrailingDataError",
    "TruncatedInputError",
    "header_to_packet",
    "is_opus_head",
    "parse",
    "serialize",
]
