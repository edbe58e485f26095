"""Models for enum and variant types used by OpusHead headers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Literal

from mashumaro.config import BaseConfig
from mashumaro.mixins.orjson import DataClassORJSONMixin
from mashumaro.types import Discriminator


class ChannelMappingFamily(IntEnum):
    """Known channel mapping families."""

    SINGLE_STREAM = 0
    """Single mono or stereo stream, no mapping table follows."""
    MULTISTREAM = 1
    """
    Multistream with a mapping table.

    Values 2-255 are reserved and carry a table of the same shape.
    """


# Stream mapping entries
@dataclass(frozen=True)
class StreamMapping(DataClassORJSONMixin):
    """Base class for stream mapping table entries."""

    left: int
    """Output channel index, the left channel for stereo streams."""

    stereo_flag: ClassVar[int]
    """Value of the stereo flag byte for this entry on the wire."""
    size: ClassVar[int]
    """Number of bytes this entry occupies on the wire."""

    class Config(BaseConfig):
        """Config for parsing mapping entries."""

        discriminator = Discriminator(field="type", include_subtypes=True)


@dataclass(frozen=True)
class MonoStream(StreamMapping):
    """A stream decoded to a single output channel."""

    type: Literal["mono"] = "mono"

    stereo_flag: ClassVar[int] = 0
    size: ClassVar[int] = 2


@dataclass(frozen=True)
class StereoStream(StreamMapping):
    """A stream decoded to a pair of output channels."""

    right: int
    """Output channel index for the right channel."""
    type: Literal["stereo"] = "stereo"

    stereo_flag: ClassVar[int] = 1
    size: ClassVar[int] = 3
