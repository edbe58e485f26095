import logging

import pytest

from opushead import (
    OPUS_HEAD_MIN_SIZE,
    BadMagicError,
    BufferTooSmallError,
    Header,
    InvalidHeaderError,
    InvalidStereoFlagError,
    MonoStream,
    ParseError,
    StereoStream,
    TrailingDataError,
    TruncatedInputError,
    header_to_packet,
    is_opus_head,
    parse,
    serialize,
)

MULTISTREAM_HEADER = Header(
    version=0,
    input_sample_rate=48000,
    channel_mapping_family=1,
    channel_count=3,
    pre_skip=312,
    stream_mapping=(StereoStream(left=0, right=1), MonoStream(left=2)),
)

MULTISTREAM_PACKET = (
    b"OpusHead"
    b"\x00"  # version
    b"\x80\xbb\x00\x00"  # 48000 Hz
    b"\x01"  # channel mapping family
    b"\x03"  # channel count
    b"\x38\x01"  # pre-skip 312
    b"\x02"  # stream count
    b"\x01\x00\x01"  # stereo, left 0, right 1
    b"\x00\x02"  # mono, left 2
)

STEREO_PACKET = b"OpusHead\x00\x44\xac\x00\x00\x00\x02\x00\x0f"

VALID_PACKETS = [STEREO_PACKET, MULTISTREAM_PACKET]


def test_parse_single_stream():
    header = parse(STEREO_PACKET)
    assert header == Header(
        version=0,
        input_sample_rate=44100,
        channel_mapping_family=0,
        channel_count=2,
        pre_skip=3840,
    )
    assert header.stream_mapping is None
    assert header.stream_count is None


def test_parse_multistream():
    header = parse(MULTISTREAM_PACKET)
    assert header == MULTISTREAM_HEADER
    assert header.stream_count == 2


def test_serialize_multistream():
    buffer = bytearray(64)
    written = serialize(MULTISTREAM_HEADER, buffer)
    assert written == len(MULTISTREAM_PACKET) == 23
    assert bytes(buffer[:written]) == MULTISTREAM_PACKET
    assert header_to_packet(MULTISTREAM_HEADER) == MULTISTREAM_PACKET


def test_parse_accepts_memoryview_and_bytearray():
    assert parse(memoryview(MULTISTREAM_PACKET)) == MULTISTREAM_HEADER
    assert parse(bytearray(MULTISTREAM_PACKET)) == MULTISTREAM_HEADER


@pytest.mark.parametrize(
    "header",
    [
        Header.single_stream(channel_count=1),
        Header.single_stream(channel_count=2, input_sample_rate=0xFFFFFFFF, pre_skip=0xFFFF),
        MULTISTREAM_HEADER,
        Header.multistream([], channel_count=0),
        Header.multistream(
            [StereoStream(left=i, right=255 - i) for i in range(255)],
            channel_count=255,
            channel_mapping_family=255,
        ),
        Header.multistream([MonoStream(left=i) for i in range(8)], channel_count=8),
    ],
)
def test_round_trip(header):
    packet = header_to_packet(header)
    assert len(packet) == header.packet_size
    parsed = parse(packet)
    assert parsed == header
    assert parse(header_to_packet(parsed)) == parsed


def test_empty_mapping_table_is_not_absent():
    header = parse(b"OpusHead\x00\x80\xbb\x00\x00\x01\x00\x00\x00\x00")
    assert header.stream_mapping == ()
    assert header.stream_count == 0


def test_serialize_normalizes_version():
    header = Header(
        version=3,
        input_sample_rate=16000,
        channel_mapping_family=0,
        channel_count=1,
        pre_skip=0,
    )
    packet = header_to_packet(header)
    assert packet[8] == 0
    assert parse(packet).version == 0


@pytest.mark.parametrize("packet", VALID_PACKETS)
def test_truncated_packets_are_rejected(packet):
    for length in range(len(packet)):
        with pytest.raises(TruncatedInputError):
            parse(packet[:length])


@pytest.mark.parametrize(
    "packet",
    [
        b"OggS\x00\x02\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00",
        b"opushead\x00\x80\xbb\x00\x00\x00\x02\x00\x00",
        b"OpusTags\x00\x80\xbb\x00\x00\x00\x02\x00\x00",
        b"X",
    ],
)
def test_bad_magic(packet):
    with pytest.raises(BadMagicError):
        parse(packet)
    assert not is_opus_head(packet)


def test_short_tag_prefix_is_truncation():
    with pytest.raises(TruncatedInputError):
        parse(b"Opus")


def test_is_opus_head():
    assert is_opus_head(MULTISTREAM_PACKET)
    assert is_opus_head(b"OpusHead")
    assert not is_opus_head(b"OpusHea")


@pytest.mark.parametrize("flag", [2, 3, 0xFF])
def test_invalid_stereo_flag(flag):
    packet = b"OpusHead\x00\x80\xbb\x00\x00\x01\x01\x00\x00\x01" + bytes([flag, 0, 0])
    with pytest.raises(InvalidStereoFlagError) as exc_info:
        parse(packet)
    assert exc_info.value.index == 0
    assert exc_info.value.flag == flag


def test_invalid_stereo_flag_checked_before_truncation():
    with pytest.raises(InvalidStereoFlagError):
        parse(b"OpusHead\x00\x80\xbb\x00\x00\x01\x01\x00\x00\x01\x02")


def test_unknown_stereo_flag_tolerated_for_later_versions():
    packet = b"OpusHead\x01\x80\xbb\x00\x00\x01\x01\x00\x00\x01\x02\x05"
    header = parse(packet)
    assert header.version == 1
    assert header.stream_mapping == (MonoStream(left=5),)


@pytest.mark.parametrize("packet", VALID_PACKETS)
def test_trailing_data_rejected_for_version_0(packet):
    with pytest.raises(TrailingDataError) as exc_info:
        parse(packet + b"\x00")
    assert exc_info.value.expected == len(packet)
    assert exc_info.value.actual == len(packet) + 1


@pytest.mark.parametrize("family", [0, 1, 2, 255])
def test_trailing_data_tolerated_for_later_versions(family):
    packet = b"OpusHead\x01\x80\xbb\x00\x00" + bytes([family]) + b"\x02\x00\x00"
    if family:
        packet += b"\x01\x01\x00\x01"
    header = parse(packet + b"future extension")
    assert header.version == 1
    assert header.channel_mapping_family == family


def test_reserved_family_parsed_like_family_1():
    packet = bytearray(MULTISTREAM_PACKET)
    packet[13] = 2
    header = parse(packet)
    assert header.channel_mapping_family == 2
    assert header.stream_mapping == MULTISTREAM_HEADER.stream_mapping


@pytest.mark.parametrize("capacity", range(OPUS_HEAD_MIN_SIZE))
def test_serialize_into_too_small_buffer(capacity):
    header = Header.single_stream(channel_count=2)
    with pytest.raises(BufferTooSmallError):
        serialize(header, bytearray(capacity))


def test_serialize_fails_when_mapping_table_does_not_fit():
    buffer = bytearray(len(MULTISTREAM_PACKET) - 1)
    with pytest.raises(BufferTooSmallError) as exc_info:
        serialize(MULTISTREAM_HEADER, buffer)
    assert exc_info.value.offset == len(MULTISTREAM_PACKET) - 1


def test_serialize_into_exact_buffer():
    buffer = bytearray(OPUS_HEAD_MIN_SIZE)
    assert serialize(Header.single_stream(channel_count=1), buffer) == OPUS_HEAD_MIN_SIZE


def test_serialize_rejects_inconsistent_header():
    header = Header(
        version=0,
        input_sample_rate=48000,
        channel_mapping_family=1,
        channel_count=2,
        pre_skip=0,
    )
    buffer = bytearray(64)
    with pytest.raises(InvalidHeaderError):
        serialize(header, buffer)
    assert buffer == bytearray(64)


def test_parse_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse(b"")
    assert issubclass(TruncatedInputError, ParseError)


def test_rejection_logged_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="opushead.codec"):
        with pytest.raises(BadMagicError):
            parse(b"OggS" * 4)
    assert "Rejected OpusHead packet of 16 bytes" in caplog.text


def test_parse_strided_view():
    interleaved = bytes(b for byte in MULTISTREAM_PACKET for b in (byte, 0xEE))
    assert parse(memoryview(interleaved)[::2]) == MULTISTREAM_HEADER
