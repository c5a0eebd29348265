"""Shared value types for RuuviTag readings.

Kept separate from :mod:`ruuvi.tag` so collaborators (JSON mapping, frame
logs) can depend on the address type without importing any codec.
"""

from .types import INVALID_MAC, MACAddress, mac_or_none

__all__ = ["INVALID_MAC", "MACAddress", "mac_or_none"]
