"""
Data Format 3 (RAWv1), deprecated but still common on deployed tags.

A 14-byte frame::

  byte   0     : format tag (0x03)
  byte   1     : humidity, 0.5 % steps                       (0 = n/a)
  bytes  2-3   : temperature, sign-magnitude whole degrees
                 plus hundredths                             (00 00 = n/a)
  bytes  4-5   : pressure, uint16, Pa above 50000            (0 = n/a)
  bytes  6-11  : acceleration X/Y/Z, int16, mG               (always valid)
  bytes 12-13  : battery voltage, uint16, mV                 (0 = n/a)

The acceleration slots have no "not available" value: zero is a genuine
reading there, so they always decode as present.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import NilInputError
from .fields import (
    HALF_PERCENT_HUMIDITY,
    LEGACY_PRESSURE,
    ScaledField,
    check_frame,
    decode_sign_magnitude,
    encode_sign_magnitude,
    is_absent,
    new_frame,
)

FORMAT_TAG = 0x03
FRAME_LENGTH = 14
TEMPERATURE_OFFSET = 2

ACCELERATION_X = ScaledField("acceleration_x", 6, "h", divisor=1000.0)
ACCELERATION_Y = ScaledField("acceleration_y", 8, "h", divisor=1000.0)
ACCELERATION_Z = ScaledField("acceleration_z", 10, "h", divisor=1000.0)
BATTERY_VOLTAGE = ScaledField("battery_voltage", 12, "H", sentinel=0, integral=True)

SCALED_FIELDS = (
    HALF_PERCENT_HUMIDITY,
    LEGACY_PRESSURE,
    ACCELERATION_X,
    ACCELERATION_Y,
    ACCELERATION_Z,
    BATTERY_VOLTAGE,
)


@dataclass(frozen=True)
class Format3Reading:
    humidity: Optional[float] = None  # %RH
    temperature: Optional[float] = None  # °C
    pressure: Optional[int] = None  # Pa
    acceleration_x: Optional[float] = None  # G
    acceleration_y: Optional[float] = None  # G
    acceleration_z: Optional[float] = None  # G
    battery_voltage: Optional[int] = None  # mV


def decode_format3(data: bytes) -> Format3Reading:
    """Decode a 14-byte Format 3 frame."""
    frame = check_frame(data, FORMAT_TAG, FRAME_LENGTH)

    whole = frame[TEMPERATURE_OFFSET]
    hundredths = frame[TEMPERATURE_OFFSET + 1]
    temperature = None
    if whole or hundredths:
        temperature = decode_sign_magnitude(whole, hundredths)

    return Format3Reading(
        temperature=temperature,
        **{slot.name: slot.decode(frame) for slot in SCALED_FIELDS},
    )


def encode_format3(reading: Optional[Format3Reading]) -> bytes:
    """
    Encode ``reading`` into a 14-byte Format 3 frame.

    Absent humidity, temperature, pressure and battery are written as zero.
    An absent acceleration is also written as zero, which reads back as a
    present 0 G value.
    """
    if reading is None:
        raise NilInputError()

    buf = new_frame(FORMAT_TAG, FRAME_LENGTH)
    for slot in SCALED_FIELDS:
        slot.encode(buf, getattr(reading, slot.name))

    if not is_absent(reading.temperature):
        whole, hundredths = encode_sign_magnitude(
            "temperature", reading.temperature, with_fraction=True
        )
        buf[TEMPERATURE_OFFSET] = whole
        buf[TEMPERATURE_OFFSET + 1] = hundredths

    return bytes(buf)


__all__ = ["FORMAT_TAG", "FRAME_LENGTH", "Format3Reading", "decode_format3", "encode_format3"]
