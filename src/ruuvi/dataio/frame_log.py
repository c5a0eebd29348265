"""
Helpers for text files holding one hex-encoded frame per line.

A frame log looks like::

  # captured 2024-05-01
  0512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F
  03:29:1A:1E:CE:1E:FC:18:F9:42:02:CA:0B:53

Blank lines and ``#`` comments are skipped. Lines that are not valid hex, or
frames that fail to decode, are logged and skipped so one bad capture does not
abort a whole file.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Sequence

import numpy as np

from ..tag.decoder import DecodedData, decode
from ..tag.errors import RuuviError
from .json_codec import INT_SLOTS, MAC_SLOT, decoded_to_dict

logger = logging.getLogger(__name__)

MISSING_INT = -1
MAC_DTYPE = "U17"


def parse_hex(text: str) -> bytes:
    """
    Parse one hex frame; ``0x`` prefix, whitespace, ``:`` and ``-`` allowed.

    Raises ``ValueError`` for anything that is not an even run of hex digits.
    """
    cleaned = text.strip()
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    cleaned = "".join(cleaned.replace(":", " ").replace("-", " ").split())
    if not cleaned:
        raise ValueError("empty hex string")
    return bytes.fromhex(cleaned)


def iter_frames(lines: Iterable[str]) -> Iterator[bytes]:
    """Yield the raw bytes of every valid hex line in ``lines``."""
    for line_no, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        try:
            yield parse_hex(text)
        except ValueError as exc:
            logger.warning("Bad hex frame on line %d: %r (%s)", line_no, text, exc)


def decode_lines(lines: Iterable[str]) -> List[DecodedData]:
    decoded: List[DecodedData] = []
    for frame in iter_frames(lines):
        try:
            decoded.append(decode(frame))
        except RuuviError as exc:
            logger.warning("Skipping frame %s (%s)", frame.hex(), exc)
    logger.debug("Decoded %d frames", len(decoded))
    return decoded


def load_frame_file(path: Path) -> List[DecodedData]:
    """Decode every frame in the log at ``path``."""
    with Path(path).open("r", encoding="utf-8") as fh:
        return decode_lines(fh)


def columns_for(decoded: Sequence[DecodedData]) -> List[str]:
    """``format`` followed by the union of slot names, in first-seen order."""
    order = ["format"]
    for item in decoded:
        for f in fields(item.reading):
            if f.name not in order:
                order.append(f.name)
    return order


def _dtype_for(column: str) -> str:
    if column == "format" or column in INT_SLOTS:
        return "i8"
    if column == MAC_SLOT:
        return MAC_DTYPE
    return "f8"


def _missing_for(column: str) -> Any:
    kind = _dtype_for(column)
    if kind == "i8":
        return MISSING_INT
    if kind == MAC_DTYPE:
        return ""
    return np.nan


def to_structured_array(decoded: Sequence[DecodedData]) -> np.ndarray:
    """
    Tabulate decoded frames into a NumPy structured array.

    Absent float slots become NaN, absent integer slots ``-1`` and an absent
    MAC address the empty string. Slots a format does not have are filled the
    same way, so mixed-format logs share one table.
    """
    columns = columns_for(decoded)
    data = np.zeros(len(decoded), dtype=[(col, _dtype_for(col)) for col in columns])
    for col in columns:
        data[col] = _missing_for(col)

    for row_idx, item in enumerate(decoded):
        for key, value in decoded_to_dict(item).items():
            if value is None:
                continue
            data[key][row_idx] = value
    return data


def write_csv(path: Path, decoded: Sequence[DecodedData]) -> None:
    """
    Write a header row and one row per decoded frame to a CSV file.

    Absent slots are left empty. Directories are created as needed.
    """
    path = Path(path)
    columns = columns_for(decoded)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(columns)
        for item in decoded:
            record = decoded_to_dict(item)
            writer.writerow(["" if record.get(col) is None else record[col] for col in columns])


__all__ = [
    "columns_for",
    "decode_lines",
    "iter_frames",
    "load_frame_file",
    "parse_hex",
    "to_structured_array",
    "write_csv",
]
