"""Tests for the ROM metadata store."""

from __future__ import annotations

import pytest

from pydiz.data import (
    EMULATION_CONTEXT,
    AnalysisError,
    DataError,
    FlagType,
    InOutPoint,
    ProcessorContext,
    RomData,
    RomMapMode,
)


def make_data(size: int = 0x8000, map_mode: RomMapMode = RomMapMode.LO_ROM) -> RomData:
    rom = bytes(index & 0xFF for index in range(size))
    return RomData(rom, map_mode=map_mode)


def test_empty_rom_is_rejected() -> None:
    with pytest.raises(DataError):
        RomData(b"")


def test_little_endian_reads() -> None:
    data = make_data()

    assert data.get_rom_byte(0x10) == 0x10
    assert data.get_rom_word(0x10) == 0x1110
    assert data.get_rom_long(0x10) == 0x121110


def test_reads_outside_rom_raise() -> None:
    data = make_data()

    with pytest.raises(AnalysisError):
        data.get_rom_byte(0x8000)
    with pytest.raises(AnalysisError):
        data.get_rom_word(0x7FFF)
    with pytest.raises(AnalysisError):
        data.get_flag(-1)


def test_fresh_metadata_defaults() -> None:
    data = make_data()

    assert data.get_flag(0) is FlagType.UNREACHED
    assert data.get_context(0) == ProcessorContext()
    assert data.get_in_out_point(0) == InOutPoint.NONE


def test_context_round_trip_and_mx_flags() -> None:
    data = make_data()

    data.set_context(4, ProcessorContext(direct_page=0x1FF00, data_bank=0x17F, x_flag=True, m_flag=False))
    assert data.get_context(4) == ProcessorContext(0xFF00, 0x7F, True, False)
    assert data.get_mx_flags(4) == 0x10

    data.set_mx_flags(4, 0x20)
    assert data.get_m_flag(4) is True
    assert data.get_x_flag(4) is False


def test_status_mask_helpers() -> None:
    assert ProcessorContext().with_status_mask(0x30, set_bits=True) == EMULATION_CONTEXT
    assert EMULATION_CONTEXT.with_status_mask(0x10, set_bits=False) == ProcessorContext(x_flag=False, m_flag=True)


def test_in_out_points_accumulate_and_clear() -> None:
    data = make_data()

    data.set_in_out_point(8, InOutPoint.IN_POINT)
    data.set_in_out_point(8, InOutPoint.READ_POINT)
    assert data.get_in_out_point(8) == InOutPoint.IN_POINT | InOutPoint.READ_POINT

    data.clear_in_out_points()
    assert data.get_in_out_point(8) == InOutPoint.NONE


def test_bulk_marking_clamps_to_rom_end() -> None:
    data = make_data()

    assert data.mark(0x7FFE, FlagType.DATA_16BIT, 4) == 0x8000
    assert data.get_flag(0x7FFF) is FlagType.DATA_16BIT
    assert data.mark_data_bank(0, 0x7E, 3) == 3
    assert data.get_data_bank(2) == 0x7E
    assert data.mark_direct_page(0, 0x2100, 2) == 2
    assert data.mark_m_flag(0, True, 2) == 2
    assert data.mark_x_flag(0, True, 2) == 2
    assert data.get_context(1) == ProcessorContext(0x2100, 0x7E, True, True)
    assert list(data.offsets_with_flag(FlagType.DATA_16BIT)) == [0x7FFE, 0x7FFF]

    with pytest.raises(DataError):
        data.mark(0, FlagType.TEXT, -1)


def test_labels_and_comments() -> None:
    data = make_data()

    data.add_label(0x008000, "reset")
    data.add_comment(0x008000, "entry point")
    assert data.get_label_name(0x008000) == "reset"
    assert data.get_comment(0x008000) == "entry point"

    data.add_label(0x008000, None)
    assert data.get_label_name(0x008000) == ""


def test_store_level_mapping_is_bounded_by_rom_size() -> None:
    data = make_data()

    assert data.convert_pc_to_snes(0x7FFF) == 0x00FFFF
    assert data.convert_pc_to_snes(0x8000) == -1
    assert data.convert_snes_to_pc(0x00FFFF) == 0x7FFF
    assert data.convert_snes_to_pc(0x7E0000) == -1
