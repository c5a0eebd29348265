"""Configuration objects and helpers for the ``ruuvi`` tool.

A small YAML file (path from ``--config`` or ``$RUUVI_CONFIG``) sets the CLI
defaults: JSON indentation, log level, the default encode format and
whether Format 5 output is wrapped in manufacturer data. See
:mod:`runtime` for the typed dataclass.
"""

from .runtime import CONFIG_ENV_VAR, RuuviConfig, config_from_mapping, load_config

__all__ = ["CONFIG_ENV_VAR", "RuuviConfig", "config_from_mapping", "load_config"]
