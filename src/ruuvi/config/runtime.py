"""
Runtime configuration for the ``ruuvi`` command-line tool.

The YAML file may set the keys flat at the top level::

  json_indent: 0
  encode_format: 3

or group them under a ``cli:`` section, which lets one file also carry
settings for other tools (capture scripts, dashboards) that this loader
ignores::

  cli:
    log_level: debug
    manufacturer_envelope: true
  scanner:
    adapter: hci0

Keys inside ``cli:`` win over the same keys at the top level. A key left
empty (``encode_format:``) keeps its default.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

CONFIG_ENV_VAR = "RUUVI_CONFIG"
CLI_SECTION = "cli"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_ENCODE_FORMATS = (2, 3, 4, 5)


def _as_int(name: str, value: Any, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{name}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name}: expected an integer, got {value!r}") from None


@dataclass(slots=True)
class RuuviConfig:
    """
    Output and encoding defaults for the CLI.

    None of these knobs reach the codecs themselves; they only shape how
    readings are printed and which format ``encode`` targets.
    """

    json_indent: int = 2
    manufacturer_envelope: bool = False
    log_level: str = "WARNING"
    encode_format: int = 5

    def sanitized(self) -> RuuviConfig:
        """
        Return a copy with values clamped to what the CLI accepts.

        ``None`` falls back to the default; a value that is not a number at
        all raises ``ValueError``.
        """
        defaults = RuuviConfig()
        level = defaults.log_level
        if self.log_level is not None and str(self.log_level).upper() in _LOG_LEVELS:
            level = str(self.log_level).upper()
        encode_format = _as_int("encode_format", self.encode_format, defaults.encode_format)
        if encode_format not in _ENCODE_FORMATS:
            encode_format = defaults.encode_format
        return RuuviConfig(
            json_indent=max(0, _as_int("json_indent", self.json_indent, defaults.json_indent)),
            manufacturer_envelope=bool(self.manufacturer_envelope),
            log_level=level,
            encode_format=encode_format,
        )

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


def _select_settings(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge the top-level keys with the ``cli:`` section, keeping known keys only."""
    known = {f.name for f in fields(RuuviConfig)}
    section = data.get(CLI_SECTION)
    if section is not None and not isinstance(section, Mapping):
        raise ValueError(f"'{CLI_SECTION}' must be a mapping, got {type(section).__name__}")

    settings = {key: value for key, value in data.items() if key in known}
    if section:
        settings.update((key, value) for key, value in section.items() if key in known)
    return settings


def config_from_mapping(data: Mapping[str, Any] | None) -> RuuviConfig:
    """Build :class:`RuuviConfig` from a parsed YAML mapping (unknown keys ignored)."""
    if not data:
        return RuuviConfig()
    return RuuviConfig(**_select_settings(data)).sanitized()


def load_config(path: str | Path | None = None) -> RuuviConfig:
    """
    Load configuration from ``path`` or, when omitted, ``$RUUVI_CONFIG``.

    A missing file gives the defaults. A file whose top level is not a
    mapping raises ``ValueError``.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return RuuviConfig()

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        return RuuviConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        return RuuviConfig()
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["CLI_SECTION", "CONFIG_ENV_VAR", "RuuviConfig", "config_from_mapping", "load_config"]
