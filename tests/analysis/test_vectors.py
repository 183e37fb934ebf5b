"""Tests for interrupt vector seeding."""

from __future__ import annotations

from pydiz.analysis import EMULATION_VECTORS, NATIVE_VECTORS, read_vectors, seed_vectors
from pydiz.data import EMULATION_CONTEXT, RomData


def make_data(vectors: dict[int, int]) -> RomData:
    rom = bytearray(0x8000)
    for address, target in vectors.items():
        # Bank $00 vectors live at the end of the first LoROM bank.
        offset = address - 0x8000
        rom[offset] = target & 0xFF
        rom[offset + 1] = target >> 8
    return RomData(bytes(rom))


def test_vector_tables_cover_both_modes() -> None:
    assert [name for name, _ in NATIVE_VECTORS] == [
        "Native_COP",
        "Native_BRK",
        "Native_ABORT",
        "Native_NMI",
        "Native_IRQ",
    ]
    assert dict(EMULATION_VECTORS)["Emulation_RESET"] == 0x00FFFC


def test_unmapped_targets_are_skipped() -> None:
    data = make_data({0xFFFC: 0x8000, 0xFFEA: 0x8100})

    entries = read_vectors(data)

    assert [(entry.name, entry.offset) for entry in entries] == [("Native_NMI", 0x100), ("Emulation_RESET", 0)]


def test_seed_sets_reset_context_and_labels() -> None:
    data = make_data({0xFFFC: 0x8000, 0xFFEA: 0x8100})

    seed_vectors(data)

    assert data.get_context(0) == EMULATION_CONTEXT
    assert data.get_label_name(0x008000) == "Emulation_RESET"
    assert data.get_label_name(0x008100) == "Native_NMI"


def test_seed_keeps_existing_labels() -> None:
    data = make_data({0xFFFC: 0x8000})
    data.add_label(0x008000, "start")

    seed_vectors(data)
    assert data.get_label_name(0x008000) == "start"

    seed_vectors(data, label=False)
    assert data.get_label_name(0x008000) == "start"
