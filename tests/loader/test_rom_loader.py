"""Tests for SNES ROM loading and header detection."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from pydiz.data import RomMapMode, RomSpeed
from pydiz.loader import RomFormatError, load_rom, load_rom_from_path


def make_rom(
    size: int = 0x8000,
    header: int = 0x7FC0,
    *,
    title: bytes = b"TEST ROM",
    map_byte: int = 0x20,
    chipset: int = 0x00,
    checksum: int = 0x1234,
    reset: int = 0x8000,
) -> bytes:
    rom = bytearray(size)
    rom[header : header + 21] = title.ljust(21, b" ")
    rom[header + 0x15] = map_byte
    rom[header + 0x16] = chipset
    rom[header + 0x1C : header + 0x1E] = (checksum ^ 0xFFFF).to_bytes(2, "little")
    rom[header + 0x1E : header + 0x20] = checksum.to_bytes(2, "little")
    rom[header + 0x3C : header + 0x3E] = reset.to_bytes(2, "little")
    return bytes(rom)


def test_load_lorom_image() -> None:
    image = load_rom(io.BytesIO(make_rom()))

    assert image.title == "TEST ROM"
    assert image.map_mode is RomMapMode.LO_ROM
    assert image.speed is RomSpeed.SLOW_ROM
    assert image.header_offset == 0x7FC0
    assert image.copier_header is False
    assert len(image) == 0x8000


def test_copier_header_is_stripped() -> None:
    image = load_rom(io.BytesIO(bytes(0x200) + make_rom()))

    assert image.copier_header is True
    assert len(image) == 0x8000
    assert image.title == "TEST ROM"


def test_fast_hirom_header_wins_over_empty_lorom_slot() -> None:
    image = load_rom(io.BytesIO(make_rom(0x10000, 0xFFC0, map_byte=0x31)))

    assert image.map_mode is RomMapMode.HI_ROM
    assert image.speed is RomSpeed.FAST_ROM
    assert image.header_offset == 0xFFC0


@pytest.mark.parametrize(
    "map_byte, chipset, expected",
    [
        (0x20, 0x14, RomMapMode.SUPER_FX),
        (0x23, 0x34, RomMapMode.SA1_ROM),
        (0x22, 0x00, RomMapMode.EX_LO_ROM),
    ],
)
def test_special_chip_layouts(map_byte: int, chipset: int, expected: RomMapMode) -> None:
    image = load_rom(io.BytesIO(make_rom(map_byte=map_byte, chipset=chipset)))

    assert image.map_mode is expected


def test_explicit_map_mode_overrides_header() -> None:
    image = load_rom(io.BytesIO(make_rom()), map_mode=RomMapMode.HI_ROM)

    assert image.map_mode is RomMapMode.HI_ROM
    assert image.title == "TEST ROM"


def test_headerless_image_keeps_defaults() -> None:
    image = load_rom(io.BytesIO(bytes(0x8000)))

    assert image.title == ""
    assert image.map_mode is RomMapMode.LO_ROM
    assert image.speed is RomSpeed.UNKNOWN
    assert image.header_offset == -1


@pytest.mark.parametrize("raw", [b"", bytes(0x100)])
def test_unusable_images_are_rejected(raw: bytes) -> None:
    with pytest.raises(RomFormatError):
        load_rom(io.BytesIO(raw))


def test_load_from_path(tmp_path: Path) -> None:
    path = tmp_path / "game.sfc"
    path.write_bytes(make_rom())

    image = load_rom_from_path(path)

    assert image.title == "TEST ROM"


def test_reset_vector_is_read_little_endian() -> None:
    # Bytes FF 00 read as $00FF, below $8000, so the LoROM slot scores one point less.
    rom = bytearray(make_rom(0x10000, 0xFFC0, map_byte=0x21))
    lorom = make_rom(0x10000, 0x7FC0, reset=0x00FF)
    rom[0x7FC0:0x8000] = lorom[0x7FC0:0x8000]

    image = load_rom(io.BytesIO(bytes(rom)))

    assert image.map_mode is RomMapMode.HI_ROM
    assert image.header_offset == 0xFFC0
