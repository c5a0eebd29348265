"""
Per-field scale/sentinel descriptors shared by the frame codecs.

Every numeric slot of a frame is described by a :class:`ScaledField`: where
it sits, its big-endian raw type, how a raw integer maps to physical units and
which raw value means "not available". The tables built from these
descriptors are module-level constants and are never mutated.

Formats 2, 3 and 4 store temperature as sign-magnitude (a sign bit plus a
7-bit whole-degree magnitude, optionally followed by a hundredths byte);
:func:`decode_sign_magnitude` and :func:`encode_sign_magnitude` handle that
explicitly instead of going through a signed integer cast.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidLengthError, ValueOutOfRangeError, WrongFormatTagError

Number = Union[int, float]

_RAW_LIMITS = {
    "b": (-0x80, 0x7F),
    "B": (0, 0xFF),
    "h": (-0x8000, 0x7FFF),
    "H": (0, 0xFFFF),
}

SIGN_BIT = 0x80
MAGNITUDE_MASK = 0x7F
GRID_TOLERANCE = 1e-6


def _truncate(quotient: float) -> int:
    nearest = round(quotient)
    if abs(quotient - nearest) < GRID_TOLERANCE:
        return int(nearest)
    return int(quotient)


@dataclass(frozen=True)
class ScaledField:
    """
    One fixed-point slot of a frame.

    ``kind`` is a :mod:`struct` code (``b``/``B``/``h``/``H``) read big-endian
    at ``offset``. Physical value is ``raw * scale + bias`` or, when
    ``divisor`` is set, ``raw / divisor + bias``. ``integral`` slots decode to
    ``int`` (``raw + bias``). ``sentinel`` is the raw "not available" value;
    a field without one is always present and writes ``0`` when absent.
    """

    name: str
    offset: int
    kind: str
    scale: float = 1.0
    divisor: Optional[float] = None
    bias: int = 0
    sentinel: Optional[int] = None
    integral: bool = False

    @property
    def size(self) -> int:
        return struct.calcsize(">" + self.kind)

    @property
    def absent_raw(self) -> int:
        return 0 if self.sentinel is None else self.sentinel

    def read_raw(self, frame: bytes) -> int:
        return struct.unpack_from(">" + self.kind, frame, self.offset)[0]

    def from_raw(self, raw: int) -> Number:
        if self.integral:
            return raw + self.bias
        if self.divisor is not None:
            return raw / self.divisor + self.bias
        return raw * self.scale + self.bias

    def decode(self, frame: bytes) -> Optional[Number]:
        raw = self.read_raw(frame)
        if self.sentinel is not None and raw == self.sentinel:
            return None
        return self.from_raw(raw)

    def to_raw(self, value: Number) -> int:
        """
        Convert a physical value to its raw integer, truncating toward zero.

        A quotient within float noise of a grid point counts as that point, so
        every decoded value encodes back to the raw it came from.
        """
        try:
            if self.integral:
                return int(value) - self.bias
            if self.divisor is not None:
                return _truncate((value - self.bias) * self.divisor)
            return _truncate((value - self.bias) / self.scale)
        except (OverflowError, ValueError) as exc:
            raise ValueOutOfRangeError(self.name, value, 0) from exc

    def encode(self, buf: bytearray, value: Optional[Number]) -> None:
        if is_absent(value):
            raw = self.absent_raw
        else:
            raw = self.to_raw(value)
        lo, hi = _RAW_LIMITS[self.kind]
        if not lo <= raw <= hi:
            raise ValueOutOfRangeError(self.name, value, raw)
        struct.pack_into(">" + self.kind, buf, self.offset, raw)


def is_absent(value: object) -> bool:
    """``None`` and float NaN both mean "not available" on encode."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def check_frame(data: bytes, tag: int, length: int) -> bytes:
    """Validate length, then tag; return an immutable copy of the frame."""
    frame = bytes(data)
    if len(frame) != length:
        raise InvalidLengthError(f"format {tag}", length, len(frame))
    if frame[0] != tag:
        raise WrongFormatTagError(tag, frame[0])
    return frame


def new_frame(tag: int, length: int) -> bytearray:
    buf = bytearray(length)
    buf[0] = tag
    return buf


def decode_sign_magnitude(whole: int, hundredths: int = 0) -> float:
    """Decode a sign bit + 7-bit magnitude byte and an unsigned hundredths byte."""
    magnitude = float(whole & MAGNITUDE_MASK) + hundredths * 0.01
    if whole & SIGN_BIT:
        return -magnitude
    return magnitude


def _round_half_away(value: float) -> int:
    return int(math.floor(value + 0.5))


def encode_sign_magnitude(
    name: str, value: float, *, with_fraction: bool
) -> tuple[int, int]:
    """
    Split ``value`` into ``(sign|whole, hundredths)`` bytes.

    The fraction is rounded to hundredths when ``with_fraction`` is set and
    dropped (truncated) otherwise. The sign bit follows the sign of ``value``,
    so ``-0.5`` becomes ``(0x80, 50)`` and ``-0.0`` becomes ``(0x80, 0)``.
    """
    try:
        negative = math.copysign(1.0, value) < 0
        magnitude = -value if negative else value
        whole = int(magnitude)
    except (OverflowError, ValueError) as exc:
        raise ValueOutOfRangeError(name, value, 0) from exc

    hundredths = 0
    if with_fraction:
        hundredths = _round_half_away((magnitude - whole) * 100)
        if hundredths >= 100:
            whole += 1
            hundredths -= 100

    if whole > MAGNITUDE_MASK:
        raw = -whole if negative else whole
        raise ValueOutOfRangeError(name, value, raw)
    if negative:
        whole |= SIGN_BIT
    return whole, hundredths


def to_int(name: str, value: Number) -> int:
    try:
        return int(value)
    except (OverflowError, ValueError) as exc:
        raise ValueOutOfRangeError(name, value, 0) from exc


def check_range(name: str, value: Number, lo: int, hi: int) -> int:
    """Coerce an identity-scaled slot to ``int`` and check its bounds."""
    raw = to_int(name, value)
    if not lo <= raw <= hi:
        raise ValueOutOfRangeError(name, value, raw)
    return raw


# Formats 2, 3 and 4 share these two slots byte-for-byte.
HALF_PERCENT_HUMIDITY = ScaledField("humidity", 1, "B", scale=0.5, sentinel=0)
LEGACY_PRESSURE = ScaledField(
    "pressure", 4, "H", bias=50000, sentinel=0, integral=True
)


__all__ = [
    "HALF_PERCENT_HUMIDITY",
    "LEGACY_PRESSURE",
    "MAGNITUDE_MASK",
    "SIGN_BIT",
    "ScaledField",
    "check_frame",
    "check_range",
    "decode_sign_magnitude",
    "encode_sign_magnitude",
    "is_absent",
    "new_frame",
    "to_int",
]
