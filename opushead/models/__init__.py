"""Models for the OpusHead identification header."""

from __future__ import annotations

__all__ = [
    "EMITTED_VERSION",
    "MAX_STREAMS",
    "OPUS_HEAD_FORMAT",
    "OPUS_HEAD_MAGIC",
    "OPUS_HEAD_MAX_SIZE",
    "OPUS_HEAD_MIN_SIZE",
    "ChannelMappingFamily",
    "Header",
    "MonoStream",
    "StereoStream",
    "StreamMapping",
    "types",
]
import struct
from collections.abc import Iterable
from dataclasses import dataclass

from mashumaro.config import BaseConfig
from mashumaro.mixins.orjson import DataClassORJSONMixin

from opushead.errors import InvalidHeaderError

from . import types
from .types import ChannelMappingFamily, MonoStream, StereoStream, StreamMapping

OPUS_HEAD_MAGIC = b"OpusHead"

# Fixed part (little-endian): magic(8) + version(1) + input_sample_rate(4)
# + channel_mapping_family(1) + channel_count(1) + pre_skip(2) = 17 bytes
OPUS_HEAD_FORMAT = "<8sBIBBH"
OPUS_HEAD_MIN_SIZE = struct.calcsize(OPUS_HEAD_FORMAT)

MAX_STREAMS = 255
# Fixed part + stream_count(1) + every entry stereo (3 bytes each)
OPUS_HEAD_MAX_SIZE = OPUS_HEAD_MIN_SIZE + 1 + MAX_STREAMS * 3

# Only version 0 semantics are understood, so it is the only version written.
EMITTED_VERSION = 0


def _check_width(name: str, value: int, bits: int) -> None:
    if not 0 <= value < 1 << bits:
        raise InvalidHeaderError(f"{name}={value} does not fit in {bits} bits")


@dataclass(frozen=True)
class Header(DataClassORJSONMixin):
    """Parsed OpusHead identification header."""

    version: int
    """Header version, 0 is the only version with fully specified semantics."""
    input_sample_rate: int
    """Sample rate of the original input in Hz, informational only."""
    channel_mapping_family: int
    """0 for a single mono/stereo stream, nonzero when a mapping table is present."""
    channel_count: int
    """Total number of output channels."""
    pre_skip: int
    """Number of decoded samples to discard at the start of the stream."""
    stream_mapping: tuple[MonoStream | StereoStream, ...] | None = None
    """Mapping table, ``None`` when ``channel_mapping_family`` is 0."""

    class Config(BaseConfig):
        """Config for serializing headers."""

        omit_none = True

    def __post_init__(self) -> None:
        """Store the mapping table as a tuple so headers stay hashable values."""
        if self.stream_mapping is not None and not isinstance(self.stream_mapping, tuple):
            object.__setattr__(self, "stream_mapping", tuple(self.stream_mapping))

    @classmethod
    def single_stream(
        cls,
        *,
        channel_count: int,
        input_sample_rate: int = 48000,
        pre_skip: int = 0,
    ) -> Header:
        """Create a family 0 header for a single mono or stereo stream."""
        return cls(
            version=EMITTED_VERSION,
            input_sample_rate=input_sample_rate,
            channel_mapping_family=int(ChannelMappingFamily.SINGLE_STREAM),
            channel_count=channel_count,
            pre_skip=pre_skip,
        )

    @classmethod
    def multistream(
        cls,
        stream_mapping: Iterable[MonoStream | StereoStream],
        *,
        channel_count: int,
        input_sample_rate: int = 48000,
        pre_skip: int = 0,
        channel_mapping_family: int = ChannelMappingFamily.MULTISTREAM,
    ) -> Header:
        """Create a header carrying a stream mapping table."""
        return cls(
            version=EMITTED_VERSION,
            input_sample_rate=input_sample_rate,
            channel_mapping_family=int(channel_mapping_family),
            channel_count=channel_count,
            pre_skip=pre_skip,
            stream_mapping=tuple(stream_mapping),
        )

    @property
    def has_mapping_table(self) -> bool:
        """Return whether the wire format carries a stream mapping table."""
        return self.channel_mapping_family != ChannelMappingFamily.SINGLE_STREAM

    @property
    def stream_count(self) -> int | None:
        """Number of mapping entries, ``None`` when no table is present."""
        if self.stream_mapping is None:
            return None
        return len(self.stream_mapping)

    @property
    def packet_size(self) -> int:
        """Size in bytes of this header once serialized."""
        size = OPUS_HEAD_MIN_SIZE
        if self.has_mapping_table:
            size += 1 + sum(entry.size for entry in self.stream_mapping or ())
        return size

    def validate(self) -> None:
        """
        Check that the header can be written as a version 0 packet.

        Raises:
            InvalidHeaderError: If a field does not fit its wire width or the
                mapping table does not agree with the channel mapping family.
        """
        _check_width("version", self.version, 8)
        _check_width("input_sample_rate", self.input_sample_rate, 32)
        _check_width("channel_mapping_family", self.channel_mapping_family, 8)
        _check_width("channel_count", self.channel_count, 8)
        _check_width("pre_skip", self.pre_skip, 16)

        if not self.has_mapping_table:
            if self.stream_mapping is not None:
                raise InvalidHeaderError(
                    "stream_mapping must be absent when channel_mapping_family is 0"
                )
            return

        if self.stream_mapping is None:
            raise InvalidHeaderError(
                f"channel_mapping_family={self.channel_mapping_family} requires stream_mapping"
            )
        if len(self.stream_mapping) > MAX_STREAMS:
            raise InvalidHeaderError(
                f"stream_mapping has {len(self.stream_mapping)} entries, max is {MAX_STREAMS}"
            )
        for index, entry in enumerate(self.stream_mapping):
            if not isinstance(entry, (MonoStream, StereoStream)):
                raise InvalidHeaderError(
                    f"stream_mapping[{index}] is not a MonoStream or StereoStream: {entry!r}"
                )
            _check_width(f"stream_mapping[{index}].left", entry.left, 8)
            if isinstance(entry, StereoStream):
                _check_width(f"stream_mapping[{index}].right", entry.right, 8)
