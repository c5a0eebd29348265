"""Conversion between readings and JSON-ready dictionaries."""

from __future__ import annotations

import math
from dataclasses import fields
from typing import Any, Dict, Mapping

from ..common.types import MACAddress
from ..tag.decoder import CODECS, DataFormat, DecodedData, Reading
from ..tag.errors import UnknownFormatError

INT_SLOTS = frozenset(
    {"pressure", "battery_voltage", "tx_power", "movement_counter", "measurement_sequence", "tag_id"}
)
MAC_SLOT = "mac_address"


def _key(name: str) -> str:
    # "AccelerationX", "acceleration_x" and "accelerationX" all match.
    return name.replace("_", "").replace("-", "").lower()


def reading_to_dict(reading: Reading) -> Dict[str, Any]:
    """Return every slot of ``reading``; absent slots map to ``None``."""
    out: Dict[str, Any] = {}
    for f in fields(reading):
        value = getattr(reading, f.name)
        if isinstance(value, MACAddress):
            value = str(value)
        out[f.name] = value
    return out


def decoded_to_dict(decoded: DecodedData) -> Dict[str, Any]:
    out: Dict[str, Any] = {"format": int(decoded.format)}
    out.update(reading_to_dict(decoded.reading))
    return out


def _coerce_mac(value: Any) -> MACAddress:
    if isinstance(value, str):
        return MACAddress.parse(value)
    if isinstance(value, (list, tuple)):
        if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 0xFF for b in value):
            raise ValueError(f"{MAC_SLOT}: expected six byte values, got {value!r}")
        return MACAddress.from_octets(value)
    raise ValueError(f"{MAC_SLOT}: expected a string or a list of bytes, got {type(value).__name__}")


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name == MAC_SLOT:
        return _coerce_mac(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name}: expected a number, got {type(value).__name__}")
    if name in INT_SLOTS:
        if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
            raise ValueError(f"{name}: expected an integer, got {value!r}")
        return int(value)
    return float(value)


def reading_from_dict(fmt: int, mapping: Mapping[str, Any]) -> Reading:
    """
    Build the reading type of format ``fmt`` from ``mapping``.

    Missing keys and explicit ``null`` both leave the slot absent. Unknown
    keys (including ``format``) are ignored.
    """
    try:
        reading_type = CODECS[DataFormat(fmt)].reading_type
    except ValueError:
        raise UnknownFormatError(int(fmt)) from None

    by_key = {_key(str(k)): v for k, v in mapping.items()}
    kwargs: Dict[str, Any] = {}
    for f in fields(reading_type):
        key = _key(f.name)
        if key in by_key:
            kwargs[f.name] = _coerce(f.name, by_key[key])
    return reading_type(**kwargs)


__all__ = [
    "INT_SLOTS",
    "MAC_SLOT",
    "decoded_to_dict",
    "reading_from_dict",
    "reading_to_dict",
]
