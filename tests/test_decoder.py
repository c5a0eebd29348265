from __future__ import annotations

import pytest

from ruuvi.tag import (
    CODECS,
    DataFormat,
    DecodedData,
    EmptyInputError,
    Format2Reading,
    Format3Reading,
    Format4Reading,
    Format5Reading,
    InvalidLengthError,
    NilInputError,
    RuuviError,
    UnknownFormatError,
    WrongFormatTagError,
    decode,
    decode_format,
    detect_format,
    encode,
    format_of,
)

FORMAT5_VALID = bytes.fromhex("0512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F")
FORMAT3_VALID = bytes.fromhex("03291A1ECE1EFC18F94202CA0B53")

FRAME_LENGTHS = [
    (DataFormat.FORMAT_2, 6),
    (DataFormat.FORMAT_3, 14),
    (DataFormat.FORMAT_4, 7),
    (DataFormat.FORMAT_5, 24),
]


@pytest.mark.parametrize("fmt", list(DataFormat))
def test_detect_format_reads_only_the_tag(fmt: DataFormat) -> None:
    assert detect_format(bytes([int(fmt)])) is fmt


def test_detect_format_errors() -> None:
    with pytest.raises(EmptyInputError):
        detect_format(b"")
    with pytest.raises(UnknownFormatError) as info:
        detect_format(b"\xff\x00\x00")
    assert info.value.tag == 0xFF
    assert "0xFF" in str(info.value)

    with pytest.raises(UnknownFormatError):
        detect_format(b"\x06")


def test_every_error_is_a_value_error() -> None:
    for exc_type in (EmptyInputError, UnknownFormatError, InvalidLengthError):
        assert issubclass(exc_type, RuuviError)
        assert issubclass(exc_type, ValueError)


def test_decode_dispatches_on_tag() -> None:
    result = decode(FORMAT5_VALID)

    assert result.format is DataFormat.FORMAT_5
    assert isinstance(result.reading, Format5Reading)
    assert result.format5 is result.reading
    assert result.format3 is None
    assert result.format2 is None
    assert result.format4 is None
    assert result.format5.pressure == 100044


def test_decode_format3_accessor() -> None:
    result = decode(FORMAT3_VALID)
    assert result.format is DataFormat.FORMAT_3
    assert result.format3.battery_voltage == 2899
    assert result.format5 is None


def test_decode_propagates_codec_errors() -> None:
    with pytest.raises(InvalidLengthError):
        decode(FORMAT5_VALID[:10])
    with pytest.raises(EmptyInputError):
        decode(b"")


@pytest.mark.parametrize("fmt, length", FRAME_LENGTHS)
def test_decode_format_checks_length(fmt: DataFormat, length: int) -> None:
    frame = bytes([int(fmt)]) + bytes(length)
    with pytest.raises(InvalidLengthError) as info:
        decode_format(frame, fmt)
    assert info.value.expected == length
    assert info.value.actual == length + 1


@pytest.mark.parametrize("fmt, length", FRAME_LENGTHS)
def test_decode_format_checks_tag(fmt: DataFormat, length: int) -> None:
    frame = b"\x09" + bytes(length - 1)
    with pytest.raises(WrongFormatTagError) as info:
        decode_format(frame, fmt)
    assert info.value.expected == int(fmt)
    assert info.value.actual == 0x09


def test_decode_format_rejects_unknown_format() -> None:
    with pytest.raises(UnknownFormatError):
        decode_format(FORMAT5_VALID, 7)


def test_decode_format_accepts_plain_int() -> None:
    assert decode_format(FORMAT3_VALID, 3).pressure == 102766


@pytest.mark.parametrize(
    "reading, fmt",
    [
        (Format2Reading(temperature=1.0), DataFormat.FORMAT_2),
        (Format3Reading(temperature=1.0), DataFormat.FORMAT_3),
        (Format4Reading(temperature=1.0), DataFormat.FORMAT_4),
        (Format5Reading(temperature=1.0), DataFormat.FORMAT_5),
    ],
)
def test_encode_dispatches_on_reading_type(reading, fmt: DataFormat) -> None:
    assert format_of(reading) is fmt
    encoded = encode(reading)
    assert encoded[0] == int(fmt)
    assert decode(encoded) == DecodedData(format=fmt, reading=decode_format(encoded, fmt))


def test_encode_rejects_none_and_foreign_types() -> None:
    with pytest.raises(NilInputError):
        encode(None)
    with pytest.raises(TypeError):
        encode("not a reading")


def test_codec_table_covers_every_format() -> None:
    assert set(CODECS) == set(DataFormat)
    for fmt, codec in CODECS.items():
        assert format_of(codec.reading_type()) is fmt
