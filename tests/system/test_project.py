"""Tests for project assembly and listing output."""

from __future__ import annotations

from pydiz.data import RomMapMode, RomSpeed
from pydiz.loader import RomImage
from pydiz.system import ProjectConfig, create_project, create_project_from_image


def make_rom() -> bytes:
    rom = bytearray(0x8000)
    # SEP #$30 / LDA #$12 / STP
    rom[0:5] = bytes([0xE2, 0x30, 0xA9, 0x12, 0xDB])
    # Emulation RESET -> $8000
    rom[0x7FFC:0x7FFE] = bytes([0x00, 0x80])
    return bytes(rom)


def test_analyze_from_vectors_builds_listing() -> None:
    project = create_project(make_rom())

    entries = project.analyze_from_vectors()

    assert [entry.name for entry in entries] == ["Emulation_RESET"]
    assert list(project.iter_opcode_offsets()) == [0, 2, 4]
    assert project.listing_line(0) == f"Emulation_RESET:\n008000  {'E2 30':<11}  SEP #$30"
    assert project.listing_line(2) == f"008002  {'A9 12':<11}  LDA.B #$12"
    assert project.listing_line(4) == f"008004  {'DB':<11}  STP"


def test_iter_opcode_offsets_window() -> None:
    project = create_project(make_rom())
    project.analyze_from_vectors()

    assert list(project.iter_opcode_offsets(1, 4)) == [2]


def test_analyze_from_offset_harsh() -> None:
    project = create_project(make_rom())

    assert project.analyze_from(0, harsh=True, amount=4) == 4
    assert list(project.iter_opcode_offsets()) == [0, 2]


def test_project_from_image_applies_header_and_overrides() -> None:
    image = RomImage(data=make_rom(), title="GAME", map_mode=RomMapMode.HI_ROM)

    project = create_project_from_image(image)
    assert project.title == "GAME"
    assert project.data.map_mode is RomMapMode.HI_ROM
    assert project.data.speed is RomSpeed.SLOW_ROM

    project = create_project_from_image(image, ProjectConfig(map_mode=RomMapMode.LO_ROM, speed=RomSpeed.FAST_ROM))
    assert project.data.map_mode is RomMapMode.LO_ROM
    assert project.data.speed is RomSpeed.FAST_ROM


def test_trace_capacity_enables_recorder() -> None:
    assert create_project(make_rom()).recorder is None

    project = create_project(make_rom(), ProjectConfig(trace_capacity=2))
    project.analyze_from_vectors()

    assert project.recorder is not None
    assert [entry.mnemonic for entry in project.recorder.entries()] == ["LDA", "STP"]


def test_listing_line_appends_comment() -> None:
    project = create_project(make_rom())
    project.analyze_from_vectors()
    project.data.add_comment(0x008002, "load constant")

    assert project.listing_line(2) == f"008002  {'A9 12':<11}  LDA.B #$12  ; load constant"
    assert project.listing_line(4) == f"008004  {'DB':<11}  STP"
