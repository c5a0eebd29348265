"""Command-line entry point and development helpers.

:mod:`cli` implements the ``ruuvi`` console script (``decode``/``encode``
subcommands); :mod:`debug` holds the ``RUUVI_DEBUG`` timing hooks used by it.
"""
