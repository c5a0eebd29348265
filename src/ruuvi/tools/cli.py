#!/usr/bin/env python3
"""
Command-line front end for the RuuviTag frame codecs.

Examples::

  ruuvi decode --hex 0512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F
  ruuvi decode --hex 99040512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F --envelope
  ruuvi decode --file captures.txt --csv readings.csv
  ruuvi encode --json '{"temperature": 21.0, "pressure": 100000}'
  ruuvi encode --format 3 --json '{"temperature": -0.5}'

Decoded readings are printed as JSON, encoded frames as lowercase hex. Any
failure prints ``Error: ...`` on stderr and exits with status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from ..config.runtime import RuuviConfig, load_config
from ..dataio.frame_log import load_frame_file, parse_hex, write_csv
from ..dataio.json_codec import decoded_to_dict, reading_from_dict
from ..tag.decoder import DataFormat, DecodedData, decode, encode
from ..tag.envelope import decode_manufacturer_data, wrap_manufacturer_data
from ..tag.errors import RuuviError
from .debug import time_block

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1


class CommandError(Exception):
    """A user-facing failure; the message is printed after ``Error:``."""


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ruuvi",
        description="Decode and encode RuuviTag BLE advertisement data.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config file (default: $RUUVI_CONFIG, else built-in defaults).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=None,
        help="Logging level (overrides the config file).",
    )
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    dec = sub.add_parser("decode", help="Decode RuuviTag data from hex to JSON")
    source = dec.add_mutually_exclusive_group(required=True)
    source.add_argument("--hex", type=str, help="Hex-encoded RuuviTag frame")
    source.add_argument(
        "--file",
        type=str,
        help="Text file with one hex frame per line; prints one JSON object per line.",
    )
    dec.add_argument(
        "--envelope",
        action="store_true",
        help="Input starts with the 2-byte manufacturer id (Format 5 only).",
    )
    dec.add_argument(
        "--csv",
        type=str,
        default=None,
        help="With --file, write a CSV table here instead of JSON lines.",
    )
    dec.set_defaults(handler=handle_decode)

    enc = sub.add_parser("encode", help="Encode a JSON reading to hex")
    enc.add_argument("--json", type=str, required=True, help="JSON-encoded reading")
    enc.add_argument(
        "--format",
        type=int,
        choices=[int(fmt) for fmt in DataFormat],
        default=None,
        help="Target data format (default: the JSON 'format' key, else the config).",
    )
    enc.add_argument(
        "--envelope",
        action="store_true",
        help="Prefix the 2-byte manufacturer id (Format 5 only).",
    )
    enc.set_defaults(handler=handle_encode)
    return parser


def _dump(payload: Mapping[str, Any], indent: int | None) -> str:
    return json.dumps(payload, indent=indent or None)


def handle_decode(args: argparse.Namespace, config: RuuviConfig) -> int:
    if args.file:
        if args.envelope:
            raise CommandError("--envelope cannot be combined with --file")
        return _decode_file(Path(args.file).expanduser(), args.csv)
    if args.csv:
        raise CommandError("--csv requires --file")

    try:
        raw = parse_hex(args.hex)
    except ValueError as exc:
        raise CommandError(f"invalid hex string: {exc}") from exc

    try:
        with time_block("decode"):
            if args.envelope:
                decoded = DecodedData(DataFormat.FORMAT_5, decode_manufacturer_data(raw))
            else:
                decoded = decode(raw)
    except RuuviError as exc:
        raise CommandError(f"failed to decode data: {exc}") from exc

    print(_dump(decoded_to_dict(decoded), config.json_indent))
    return EXIT_SUCCESS


def _decode_file(path: Path, csv_path: str | None) -> int:
    if not path.exists():
        raise CommandError(f"file not found: {path}")
    with time_block(f"decode {path.name}"):
        decoded = load_frame_file(path)

    if csv_path:
        out = Path(csv_path).expanduser()
        write_csv(out, decoded)
        logger.info("Wrote %d readings to %s", len(decoded), out)
        return EXIT_SUCCESS

    for item in decoded:
        print(_dump(decoded_to_dict(item), None))
    return EXIT_SUCCESS


def _resolve_format(args: argparse.Namespace, payload: Mapping[str, Any], config: RuuviConfig) -> int:
    if args.format is not None:
        return args.format
    value = payload.get("format")
    if value is None:
        return config.encode_format
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CommandError(f"invalid format in JSON: {value!r}") from None


def handle_encode(args: argparse.Namespace, config: RuuviConfig) -> int:
    try:
        payload = json.loads(args.json)
    except json.JSONDecodeError as exc:
        raise CommandError(f"failed to parse JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise CommandError(f"failed to parse JSON: expected an object, got {type(payload).__name__}")

    fmt = _resolve_format(args, payload, config)
    envelope = args.envelope or config.manufacturer_envelope
    try:
        reading = reading_from_dict(fmt, payload)
        if envelope and fmt != DataFormat.FORMAT_5:
            raise CommandError(f"manufacturer envelope is only defined for format 5, not {fmt}")
        with time_block("encode"):
            frame = encode(reading)
    except (RuuviError, ValueError) as exc:
        raise CommandError(f"failed to encode data: {exc}") from exc

    if envelope:
        frame = wrap_manufacturer_data(frame)
    print(frame.hex())
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    if argv is None:
        argv = sys.argv[1:]
    args = parser.parse_args(list(argv))

    if args.command is None:
        parser.print_usage(sys.stderr)
        print("Error: no command specified", file=sys.stderr)
        return EXIT_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: failed to load config: {exc}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=args.log_level or config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return args.handler(args, config)
    except CommandError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
