"""
Manufacturer-specific data framing for Format 5.

Inside a BLE advertisement the Format 5 payload follows Ruuvi Innovations'
company identifier 0x0499, stored little-endian (``99 04``).
"""

from __future__ import annotations

from typing import Optional

from .errors import InvalidLengthError
from .format5 import FRAME_LENGTH, Format5Reading, decode_format5, encode_format5

MANUFACTURER_ID = 0x0499
MANUFACTURER_ID_BYTES = MANUFACTURER_ID.to_bytes(2, "little")
ENVELOPE_LENGTH = len(MANUFACTURER_ID_BYTES) + FRAME_LENGTH


def wrap_manufacturer_data(payload: bytes) -> bytes:
    """Prefix a 24-byte Format 5 payload with the manufacturer id."""
    payload = bytes(payload)
    if len(payload) != FRAME_LENGTH:
        raise InvalidLengthError("format 5 payload", FRAME_LENGTH, len(payload))
    return MANUFACTURER_ID_BYTES + payload


def strip_manufacturer_data(data: bytes) -> bytes:
    """
    Drop the 2-byte manufacturer id and return the Format 5 payload.

    Only the length is checked; the id bytes are not interpreted.
    """
    data = bytes(data)
    if len(data) != ENVELOPE_LENGTH:
        raise InvalidLengthError("manufacturer data", ENVELOPE_LENGTH, len(data))
    return data[len(MANUFACTURER_ID_BYTES):]


def encode_format5_manufacturer_data(reading: Optional[Format5Reading]) -> bytes:
    return wrap_manufacturer_data(encode_format5(reading))


def decode_manufacturer_data(data: bytes) -> Format5Reading:
    return decode_format5(strip_manufacturer_data(data))


__all__ = [
    "ENVELOPE_LENGTH",
    "MANUFACTURER_ID",
    "MANUFACTURER_ID_BYTES",
    "decode_manufacturer_data",
    "encode_format5_manufacturer_data",
    "strip_manufacturer_data",
    "wrap_manufacturer_data",
]
