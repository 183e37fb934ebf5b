"""Tests for the run.py command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

import run


def write_rom(tmp_path: Path) -> Path:
    rom = bytearray(0x8000)
    # SEP #$30 / LDA #$12 / STP
    rom[0:5] = bytes([0xE2, 0x30, 0xA9, 0x12, 0xDB])
    header = 0x7FC0
    rom[header : header + 21] = b"CLI TEST".ljust(21, b" ")
    rom[header + 0x15] = 0x20
    rom[header + 0x1C : header + 0x20] = bytes([0xCB, 0xED, 0x34, 0x12])
    rom[0x7FFC:0x7FFE] = bytes([0x00, 0x80])
    path = tmp_path / "cli.sfc"
    path.write_bytes(bytes(rom))
    return path


def test_listing_from_vectors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_rom(tmp_path)

    assert run.main([str(path)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "; CLI TEST [LoROM]"
    assert out[1] == "Emulation_RESET:"
    assert out[2].endswith("SEP #$30")
    assert out[3].endswith("LDA.B #$12")
    assert out[4].endswith("STP")


def test_line_limit(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_rom(tmp_path)

    run.main([str(path), "--lines", "1"])

    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert out[2].startswith("008000")


def test_harsh_decode_from_offset(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_rom(tmp_path)

    assert run.main([str(path), "--offset", "$0", "--harsh", "0x4"]) == 0

    out = capsys.readouterr().out
    assert "LDA.B #$12" in out
    assert "STP" not in out


def test_map_mode_override(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_rom(tmp_path)

    run.main([str(path), "--map-mode", "hirom", "--offset", "0", "--lines", "1"])

    assert capsys.readouterr().out.splitlines()[0] == "; CLI TEST [HiROM]"


@pytest.mark.parametrize(
    "extra",
    [
        ["--harsh", "4"],
        ["--offset", "0x9000"],
        ["--map-mode", "MegaROM"],
    ],
)
def test_argument_errors(tmp_path: Path, extra: list[str]) -> None:
    path = write_rom(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        run.main([str(path), *extra])
    assert excinfo.value.code == 2


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main([str(tmp_path / "missing.sfc")])
    assert excinfo.value.code == 2


def test_unusable_rom(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "tiny.sfc"
    path.write_bytes(bytes(0x100))

    with pytest.raises(SystemExit) as excinfo:
        run.main([str(path)])
    assert excinfo.value.code == 1
    assert "ROM image too small" in capsys.readouterr().err
