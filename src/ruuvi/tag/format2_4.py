"""
Data Formats 2 and 4, the obsolete URL-based (Eddystone) payloads.

Both carry the same first six bytes::

  byte   0     : format tag (0x02 or 0x04)
  byte   1     : humidity, 0.5 % steps                       (0 = n/a)
  byte   2     : temperature, sign-magnitude whole degrees   (0 = n/a)
  byte   3     : unused, always written as 0
  bytes  4-5   : pressure, uint16, Pa above 50000            (0 = n/a)

Format 4 appends byte 6, a random tag identifier of which only the six most
significant bits survive the URL encoding (0 = n/a).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import NilInputError
from .fields import (
    HALF_PERCENT_HUMIDITY,
    LEGACY_PRESSURE,
    check_frame,
    check_range,
    decode_sign_magnitude,
    encode_sign_magnitude,
    is_absent,
    new_frame,
)

FORMAT2_TAG = 0x02
FORMAT2_LENGTH = 6
FORMAT4_TAG = 0x04
FORMAT4_LENGTH = 7

TEMPERATURE_OFFSET = 2
TAG_ID_OFFSET = 6
TAG_ID_MEANINGFUL_MASK = 0xFC


@dataclass(frozen=True)
class Format2Reading:
    temperature: Optional[float] = None  # °C, whole degrees
    humidity: Optional[float] = None  # %RH
    pressure: Optional[int] = None  # Pa


@dataclass(frozen=True)
class Format4Reading:
    temperature: Optional[float] = None  # °C, whole degrees
    humidity: Optional[float] = None  # %RH
    pressure: Optional[int] = None  # Pa
    tag_id: Optional[int] = None  # raw byte, top 6 bits meaningful


def _decode_common(frame: bytes) -> dict:
    whole = frame[TEMPERATURE_OFFSET]
    return {
        "temperature": decode_sign_magnitude(whole) if whole else None,
        "humidity": HALF_PERCENT_HUMIDITY.decode(frame),
        "pressure": LEGACY_PRESSURE.decode(frame),
    }


def _encode_common(reading, tag: int, length: int) -> bytearray:
    if reading is None:
        raise NilInputError()
    buf = new_frame(tag, length)
    HALF_PERCENT_HUMIDITY.encode(buf, reading.humidity)
    LEGACY_PRESSURE.encode(buf, reading.pressure)
    if not is_absent(reading.temperature):
        whole, _ = encode_sign_magnitude(
            "temperature", reading.temperature, with_fraction=False
        )
        buf[TEMPERATURE_OFFSET] = whole
    return buf


def decode_format2(data: bytes) -> Format2Reading:
    """Decode a 6-byte Format 2 frame."""
    frame = check_frame(data, FORMAT2_TAG, FORMAT2_LENGTH)
    return Format2Reading(**_decode_common(frame))


def encode_format2(reading: Optional[Format2Reading]) -> bytes:
    """Encode a Format 2 frame; the temperature fraction is dropped."""
    return bytes(_encode_common(reading, FORMAT2_TAG, FORMAT2_LENGTH))


def decode_format4(data: bytes) -> Format4Reading:
    """Decode a 7-byte Format 4 frame."""
    frame = check_frame(data, FORMAT4_TAG, FORMAT4_LENGTH)
    tag_id = frame[TAG_ID_OFFSET]
    return Format4Reading(tag_id=tag_id or None, **_decode_common(frame))


def encode_format4(reading: Optional[Format4Reading]) -> bytes:
    """Encode a Format 4 frame; the temperature fraction is dropped."""
    buf = _encode_common(reading, FORMAT4_TAG, FORMAT4_LENGTH)
    if not is_absent(reading.tag_id):
        buf[TAG_ID_OFFSET] = check_range("tag_id", reading.tag_id, 0, 0xFF)
    return bytes(buf)


def significant_tag_id(tag_id: int) -> int:
    """Return the part of a Format 4 tag id that survives URL encoding."""
    return tag_id & TAG_ID_MEANINGFUL_MASK


__all__ = [
    "FORMAT2_LENGTH",
    "FORMAT2_TAG",
    "FORMAT4_LENGTH",
    "FORMAT4_TAG",
    "Format2Reading",
    "Format4Reading",
    "decode_format2",
    "decode_format4",
    "encode_format2",
    "encode_format4",
    "significant_tag_id",
]
