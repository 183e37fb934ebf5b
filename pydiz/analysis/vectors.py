"""Interrupt vector table lookups used to seed analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from pydiz.data import EMULATION_CONTEXT, RomData
from pydiz.utils import debug_enabled, debug_log


@dataclass(frozen=True)
class VectorEntry:
    name: str
    vector_address: int
    target_address: int
    offset: int


# (name, SNES address of the vector word)
NATIVE_VECTORS: Sequence[Tuple[str, int]] = (
    ("Native_COP", 0x00FFE4),
    ("Native_BRK", 0x00FFE6),
    ("Native_ABORT", 0x00FFE8),
    ("Native_NMI", 0x00FFEA),
    ("Native_IRQ", 0x00FFEE),
)
EMULATION_VECTORS: Sequence[Tuple[str, int]] = (
    ("Emulation_COP", 0x00FFF4),
    ("Emulation_ABORT", 0x00FFF8),
    ("Emulation_NMI", 0x00FFFA),
    ("Emulation_RESET", 0x00FFFC),
    ("Emulation_IRQBRK", 0x00FFFE),
)
RESET_VECTOR_NAME = "Emulation_RESET"


def read_vectors(data: RomData) -> List[VectorEntry]:
    """Return every vector whose target lands inside the ROM image."""

    entries: List[VectorEntry] = []
    for name, vector_address in (*NATIVE_VECTORS, *EMULATION_VECTORS):
        vector_offset = data.convert_snes_to_pc(vector_address)
        if vector_offset < 0 or not data.contains(vector_offset + 1):
            continue
        target = data.get_rom_word(vector_offset)
        offset = data.convert_snes_to_pc(target)
        if offset < 0:
            if debug_enabled("auto"):
                debug_log("auto", "%s -> %06x is outside the ROM", name, target)
            continue
        entries.append(VectorEntry(name, vector_address, target, offset))
    return entries


def seed_vectors(data: RomData, *, label: bool = True) -> List[VectorEntry]:
    """Prepare the vector targets as analysis entry points.

    The reset target receives the emulation-mode context the CPU starts in
    (8-bit accumulator and index registers, direct page and data bank 0).
    With ``label`` set, unnamed targets get the vector name as their label.
    """

    entries = read_vectors(data)
    for entry in entries:
        if entry.name == RESET_VECTOR_NAME:
            data.set_context(entry.offset, EMULATION_CONTEXT)
        if label and not data.get_label_name(entry.target_address):
            data.add_label(entry.target_address, entry.name)
    return entries
