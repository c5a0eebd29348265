"""Value types shared by the per-format readings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class MACAddress:
    """
    A 48-bit device address as broadcast in Format 5 frames.

    All-0xFF is the "not available" value on the wire; use
    :func:`mac_or_none` to map it to ``None``.
    """

    octets: bytes

    def __post_init__(self) -> None:
        octets = bytes(self.octets)
        if len(octets) != 6:
            raise ValueError(f"MAC address needs 6 bytes, got {len(octets)}")
        object.__setattr__(self, "octets", octets)

    @classmethod
    def parse(cls, text: str) -> MACAddress:
        """Build an address from ``AA:BB:CC:DD:EE:FF`` (``-`` also accepted)."""
        parts = text.strip().replace("-", ":").split(":")
        if len(parts) != 6:
            raise ValueError(f"Malformed MAC address: {text!r}")
        try:
            return cls(bytes(int(part, 16) for part in parts))
        except ValueError as exc:
            raise ValueError(f"Malformed MAC address: {text!r}") from exc

    @classmethod
    def from_octets(cls, values: Iterable[int]) -> MACAddress:
        return cls(bytes(values))

    def is_invalid(self) -> bool:
        return all(b == 0xFF for b in self.octets)

    def __bytes__(self) -> bytes:
        return self.octets

    def __str__(self) -> str:
        return ":".join(f"{b:02X}" for b in self.octets)


INVALID_MAC = MACAddress(b"\xff" * 6)


def mac_or_none(octets: bytes) -> Optional[MACAddress]:
    """Return a :class:`MACAddress` for ``octets`` or ``None`` when all-0xFF."""
    mac = MACAddress(octets)
    if mac.is_invalid():
        return None
    return mac


__all__ = ["INVALID_MAC", "MACAddress", "mac_or_none"]
