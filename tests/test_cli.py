from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from ruuvi.config import CONFIG_ENV_VAR
from ruuvi.tag import Format3Reading, Format5Reading, encode_format3, encode_format5
from ruuvi.tools import cli

FORMAT5_VALID = "0512FC5394C37C0004FFFC040CAC364200CDCBB8334C884F"
FORMAT3_VALID = "03291A1ECE1EFC18F94202CA0B53"


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def test_no_command_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "Error: no command specified" in err


def test_unknown_command_is_rejected_by_argparse() -> None:
    with pytest.raises(SystemExit) as info:
        cli.main(["frobnicate"])
    assert info.value.code == 2


def test_decode_hex(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--hex", FORMAT5_VALID]) == 0

    record = json.loads(capsys.readouterr().out)
    assert record["format"] == 5
    assert record["pressure"] == 100044
    assert record["movement_counter"] == 66
    assert record["mac_address"] == "CB:B8:33:4C:88:4F"


def test_decode_hex_with_envelope(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--envelope", "--hex", "9904" + FORMAT5_VALID]) == 0
    record = json.loads(capsys.readouterr().out)
    assert record["format"] == 5
    assert record["measurement_sequence"] == 205


def test_decode_invalid_hex(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--hex", "05zz"]) == 1
    assert "Error: invalid hex string" in capsys.readouterr().err


def test_decode_failure(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--hex", "0512"]) == 1
    err = capsys.readouterr().err
    assert "Error: failed to decode data" in err
    assert "24" in err


def test_decode_unknown_format(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--hex", "FF00"]) == 1
    assert "unknown format: 0xFF" in capsys.readouterr().err


def test_decode_csv_without_file(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--hex", FORMAT5_VALID, "--csv", "out.csv"]) == 1
    assert "--csv requires --file" in capsys.readouterr().err


def test_decode_file_prints_json_lines(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    frames = tmp_path / "frames.txt"
    frames.write_text(f"{FORMAT5_VALID}\n# comment\n{FORMAT3_VALID}\n", encoding="utf-8")

    assert cli.main(["decode", "--file", str(frames)]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert [json.loads(line)["format"] for line in lines] == [5, 3]


def test_decode_file_to_csv(tmp_path: Path) -> None:
    frames = tmp_path / "frames.txt"
    frames.write_text(f"{FORMAT3_VALID}\n", encoding="utf-8")
    out = tmp_path / "readings.csv"

    assert cli.main(["decode", "--file", str(frames), "--csv", str(out)]) == 0

    with out.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[0]["pressure"] == "102766"


def test_decode_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["decode", "--file", str(tmp_path / "nope.txt")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_encode_default_format(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--json", '{"temperature": 21.0, "pressure": 100000}']) == 0

    expected = encode_format5(Format5Reading(temperature=21.0, pressure=100000)).hex()
    assert capsys.readouterr().out.strip() == expected


def test_encode_format_from_flag(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--format", "3", "--json", '{"temperature": -0.5}']) == 0
    expected = encode_format3(Format3Reading(temperature=-0.5)).hex()
    assert capsys.readouterr().out.strip() == expected


def test_encode_format_from_json_key(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--json", '{"format": 3, "battery_voltage": 2899}']) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("03")
    assert out.endswith("0b53")


def test_encode_with_envelope(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--envelope", "--json", '{"temperature": 21.0}']) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("990405")
    assert len(out) == 52


def test_encode_invalid_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--json", "{not json"]) == 1
    assert "Error: failed to parse JSON" in capsys.readouterr().err


def test_encode_out_of_range(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--json", '{"temperature": 500}']) == 1
    assert "Error: failed to encode data" in capsys.readouterr().err


def test_encode_envelope_requires_format5(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["encode", "--format", "3", "--envelope", "--json", "{}"]) == 1
    assert "only defined for format 5" in capsys.readouterr().err


def test_config_file_sets_compact_json(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "ruuvi.yaml"
    config.write_text("cli:\n  json_indent: 0\n", encoding="utf-8")

    assert cli.main(["--config", str(config), "decode", "--hex", FORMAT3_VALID]) == 0

    out = capsys.readouterr().out
    assert out.count("\n") == 1
    assert json.loads(out)["format"] == 3


def test_config_file_sets_encode_format(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "ruuvi.yaml"
    config.write_text("encode_format: 2\n", encoding="utf-8")

    assert cli.main(["--config", str(config), "encode", "--json", '{"humidity": 50}']) == 0
    assert capsys.readouterr().out.strip() == "026400000000"


def test_bad_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "ruuvi.yaml"
    config.write_text("- not\n- a mapping\n", encoding="utf-8")

    assert cli.main(["--config", str(config), "decode", "--hex", FORMAT3_VALID]) == 1
    assert "Error: failed to load config" in capsys.readouterr().err


def test_config_file_with_empty_value_uses_default(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "ruuvi.yaml"
    config.write_text("encode_format:\njson_indent:\n", encoding="utf-8")

    assert cli.main(["--config", str(config), "encode", "--json", '{"temperature": 21.0}']) == 0
    expected = encode_format5(Format5Reading(temperature=21.0)).hex()
    assert capsys.readouterr().out.strip() == expected


def test_config_file_with_wrong_type_is_reported(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "ruuvi.yaml"
    config.write_text("encode_format: [5]\n", encoding="utf-8")

    assert cli.main(["--config", str(config), "decode", "--hex", FORMAT3_VALID]) == 1
    assert "Error: failed to load config" in capsys.readouterr().err


def test_decode_file_rejects_envelope(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    frames = tmp_path / "frames.txt"
    frames.write_text(f"9904{FORMAT5_VALID}\n", encoding="utf-8")

    assert cli.main(["decode", "--file", str(frames), "--envelope"]) == 1
    assert "--envelope cannot be combined with --file" in capsys.readouterr().err
