"""Format detection and the any-format decode/encode entry points."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, NamedTuple, Optional, Union

from .errors import EmptyInputError, NilInputError, UnknownFormatError
from .format2_4 import (
    Format2Reading,
    Format4Reading,
    decode_format2,
    decode_format4,
    encode_format2,
    encode_format4,
)
from .format3 import Format3Reading, decode_format3, encode_format3
from .format5 import Format5Reading, decode_format5, encode_format5

Reading = Union[Format2Reading, Format3Reading, Format4Reading, Format5Reading]


class DataFormat(IntEnum):
    FORMAT_2 = 2  # URL-based, Kickstarter devices (obsolete)
    FORMAT_3 = 3  # RAWv1, 1.x/2.x firmware (deprecated, widely deployed)
    FORMAT_4 = 4  # URL-based with tag id, pre-June 2018 (obsolete)
    FORMAT_5 = 5  # RAWv2, 2.x/3.x firmware (production)


class Codec(NamedTuple):
    reading_type: type
    decode: Callable[[bytes], Reading]
    encode: Callable[[Reading], bytes]


CODECS: Dict[DataFormat, Codec] = {
    DataFormat.FORMAT_2: Codec(Format2Reading, decode_format2, encode_format2),
    DataFormat.FORMAT_3: Codec(Format3Reading, decode_format3, encode_format3),
    DataFormat.FORMAT_4: Codec(Format4Reading, decode_format4, encode_format4),
    DataFormat.FORMAT_5: Codec(Format5Reading, decode_format5, encode_format5),
}

_FORMAT_BY_TYPE = {codec.reading_type: fmt for fmt, codec in CODECS.items()}


def detect_format(data: bytes) -> DataFormat:
    """
    Return the format announced by byte 0 of ``data``.

    Only the tag is inspected; the frame length is left to the codec.
    """
    if len(data) == 0:
        raise EmptyInputError()
    tag = data[0]
    try:
        return DataFormat(tag)
    except ValueError:
        raise UnknownFormatError(tag) from None


def format_of(reading: Reading) -> DataFormat:
    if reading is None:
        raise NilInputError()
    try:
        return _FORMAT_BY_TYPE[type(reading)]
    except KeyError:
        raise TypeError(f"Not a RuuviTag reading: {type(reading).__name__}") from None


@dataclass(frozen=True)
class DecodedData:
    """A decoded frame of any supported format."""

    format: DataFormat
    reading: Reading

    def _reading_if(self, fmt: DataFormat):
        return self.reading if self.format is fmt else None

    @property
    def format2(self) -> Optional[Format2Reading]:
        return self._reading_if(DataFormat.FORMAT_2)

    @property
    def format3(self) -> Optional[Format3Reading]:
        return self._reading_if(DataFormat.FORMAT_3)

    @property
    def format4(self) -> Optional[Format4Reading]:
        return self._reading_if(DataFormat.FORMAT_4)

    @property
    def format5(self) -> Optional[Format5Reading]:
        return self._reading_if(DataFormat.FORMAT_5)


def decode_format(data: bytes, fmt: DataFormat) -> Reading:
    """
    Decode ``data`` with the codec for ``fmt``.

    A tag byte that disagrees with ``fmt`` raises ``WrongFormatTagError``.
    """
    try:
        codec = CODECS[DataFormat(fmt)]
    except ValueError:
        raise UnknownFormatError(int(fmt)) from None
    return codec.decode(data)


def decode(data: bytes) -> DecodedData:
    """
    Detect the format of ``data`` and decode it.

    Codec errors (length, tag) propagate unchanged.
    """
    fmt = detect_format(data)
    return DecodedData(format=fmt, reading=CODECS[fmt].decode(data))


def encode(reading: Reading) -> bytes:
    """Encode any reading with the codec matching its type."""
    return CODECS[format_of(reading)].encode(reading)


__all__ = [
    "CODECS",
    "Codec",
    "DataFormat",
    "DecodedData",
    "Reading",
    "decode",
    "decode_format",
    "detect_format",
    "encode",
    "format_of",
]
