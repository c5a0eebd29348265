"""
Data Format 5 (RAWv2), the production format of 2.x and 3.x firmware.

A 24-byte frame, big-endian throughout::

  byte   0     : format tag (0x05)
  bytes  1-2   : temperature, int16, 0.005 °C steps        (0x8000 = n/a)
  bytes  3-4   : humidity, uint16, 0.0025 % steps           (0xFFFF = n/a)
  bytes  5-6   : pressure, uint16, Pa above 50000           (0xFFFF = n/a)
  bytes  7-12  : acceleration X/Y/Z, int16, mG              (0x8000 = n/a)
  bytes 13-14  : power info, battery (11 bits, mV above 1600, 0x7FF = n/a)
                 followed by TX power (5 bits, 2 dBm steps above -40 dBm,
                 0x1F = n/a)
  byte  15     : movement counter                          (0xFF = n/a)
  bytes 16-17  : measurement sequence number               (0xFFFF = n/a)
  bytes 18-23  : MAC address                               (all 0xFF = n/a)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional

from ..common.types import INVALID_MAC, MACAddress, mac_or_none
from .errors import NilInputError, ValueOutOfRangeError
from .fields import ScaledField, check_frame, check_range, is_absent, new_frame, to_int

FORMAT_TAG = 0x05
FRAME_LENGTH = 24

TEMPERATURE = ScaledField("temperature", 1, "h", scale=0.005, sentinel=-0x8000)
HUMIDITY = ScaledField("humidity", 3, "H", scale=0.0025, sentinel=0xFFFF)
PRESSURE = ScaledField("pressure", 5, "H", bias=50000, sentinel=0xFFFF, integral=True)
ACCELERATION_X = ScaledField("acceleration_x", 7, "h", divisor=1000.0, sentinel=-0x8000)
ACCELERATION_Y = ScaledField("acceleration_y", 9, "h", divisor=1000.0, sentinel=-0x8000)
ACCELERATION_Z = ScaledField("acceleration_z", 11, "h", divisor=1000.0, sentinel=-0x8000)

SCALED_FIELDS = (
    TEMPERATURE,
    HUMIDITY,
    PRESSURE,
    ACCELERATION_X,
    ACCELERATION_Y,
    ACCELERATION_Z,
)

POWER_INFO_OFFSET = 13
BATTERY_BITS = 11
TX_POWER_BITS = 5
BATTERY_MASK = (1 << BATTERY_BITS) - 1  # 0x7FF
TX_POWER_MASK = (1 << TX_POWER_BITS) - 1  # 0x1F
BATTERY_SENTINEL = BATTERY_MASK
TX_POWER_SENTINEL = TX_POWER_MASK
BATTERY_OFFSET_MV = 1600
TX_POWER_OFFSET_DBM = -40
TX_POWER_STEP_DBM = 2

MOVEMENT_OFFSET = 15
MOVEMENT_SENTINEL = 0xFF
SEQUENCE_OFFSET = 16
SEQUENCE_SENTINEL = 0xFFFF
MAC_OFFSET = 18


@dataclass(frozen=True)
class Format5Reading:
    temperature: Optional[float] = None  # °C
    humidity: Optional[float] = None  # %RH
    pressure: Optional[int] = None  # Pa
    acceleration_x: Optional[float] = None  # G
    acceleration_y: Optional[float] = None  # G
    acceleration_z: Optional[float] = None  # G
    battery_voltage: Optional[int] = None  # mV
    tx_power: Optional[int] = None  # dBm
    movement_counter: Optional[int] = None  # 0-254
    measurement_sequence: Optional[int] = None  # 0-65534
    mac_address: Optional[MACAddress] = None


def unpack_power_info(power_info: int) -> tuple[int, int]:
    """Split the 16-bit power word into ``(battery_raw, tx_power_raw)``."""
    return power_info >> TX_POWER_BITS, power_info & TX_POWER_MASK


def pack_power_info(battery_raw: int, tx_power_raw: int) -> int:
    return ((battery_raw & BATTERY_MASK) << TX_POWER_BITS) | (tx_power_raw & TX_POWER_MASK)


def decode_format5(data: bytes) -> Format5Reading:
    """
    Decode a 24-byte Format 5 frame.

    Raises :class:`~ruuvi.tag.errors.InvalidLengthError` for any other length
    and :class:`~ruuvi.tag.errors.WrongFormatTagError` when byte 0 is not 5.
    """
    frame = check_frame(data, FORMAT_TAG, FRAME_LENGTH)

    values = {slot.name: slot.decode(frame) for slot in SCALED_FIELDS}

    (power_info,) = struct.unpack_from(">H", frame, POWER_INFO_OFFSET)
    battery_raw, tx_raw = unpack_power_info(power_info)
    battery = None
    if battery_raw != BATTERY_SENTINEL:
        battery = battery_raw + BATTERY_OFFSET_MV
    tx_power = None
    if tx_raw != TX_POWER_SENTINEL:
        tx_power = tx_raw * TX_POWER_STEP_DBM + TX_POWER_OFFSET_DBM

    movement = frame[MOVEMENT_OFFSET]
    (sequence,) = struct.unpack_from(">H", frame, SEQUENCE_OFFSET)

    return Format5Reading(
        battery_voltage=battery,
        tx_power=tx_power,
        movement_counter=None if movement == MOVEMENT_SENTINEL else movement,
        measurement_sequence=None if sequence == SEQUENCE_SENTINEL else sequence,
        mac_address=mac_or_none(frame[MAC_OFFSET:FRAME_LENGTH]),
        **values,
    )


def encode_format5(reading: Optional[Format5Reading]) -> bytes:
    """
    Encode ``reading`` into a 24-byte Format 5 frame.

    Absent slots are written as their sentinel. Physical values are truncated
    toward zero onto the field's quantization grid.
    """
    if reading is None:
        raise NilInputError()

    buf = new_frame(FORMAT_TAG, FRAME_LENGTH)
    for slot in SCALED_FIELDS:
        slot.encode(buf, getattr(reading, slot.name))

    # Either half of the power word may be absent on its own.
    if is_absent(reading.battery_voltage):
        battery_raw = BATTERY_SENTINEL
    else:
        battery_raw = to_int("battery_voltage", reading.battery_voltage) - BATTERY_OFFSET_MV
        if not 0 <= battery_raw < BATTERY_SENTINEL:
            raise ValueOutOfRangeError("battery_voltage", reading.battery_voltage, battery_raw)
    if is_absent(reading.tx_power):
        tx_raw = TX_POWER_SENTINEL
    else:
        tx_dbm = to_int("tx_power", reading.tx_power)
        tx_raw = int((tx_dbm - TX_POWER_OFFSET_DBM) / TX_POWER_STEP_DBM)
        if not 0 <= tx_raw < TX_POWER_SENTINEL:
            raise ValueOutOfRangeError("tx_power", reading.tx_power, tx_raw)
    struct.pack_into(">H", buf, POWER_INFO_OFFSET, pack_power_info(battery_raw, tx_raw))

    if is_absent(reading.movement_counter):
        buf[MOVEMENT_OFFSET] = MOVEMENT_SENTINEL
    else:
        buf[MOVEMENT_OFFSET] = check_range("movement_counter", reading.movement_counter, 0, 0xFF)

    if is_absent(reading.measurement_sequence):
        sequence = SEQUENCE_SENTINEL
    else:
        sequence = check_range("measurement_sequence", reading.measurement_sequence, 0, 0xFFFF)
    struct.pack_into(">H", buf, SEQUENCE_OFFSET, sequence)

    mac = INVALID_MAC if reading.mac_address is None else MACAddress(reading.mac_address)
    buf[MAC_OFFSET:FRAME_LENGTH] = mac.octets

    return bytes(buf)


__all__ = [
    "FORMAT_TAG",
    "FRAME_LENGTH",
    "Format5Reading",
    "decode_format5",
    "encode_format5",
    "pack_power_info",
    "unpack_power_info",
]
