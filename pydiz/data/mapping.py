"""PC offset <-> SNES address conversion for the common cartridge layouts.

Both conversions return ``-1`` for addresses that do not correspond to a byte
of the ROM image (WRAM, I/O registers, SRAM/BW-RAM windows, or offsets past
the end of the image).
"""

from __future__ import annotations

from enum import Enum


class RomMapMode(Enum):
    """Cartridge memory map layouts."""

    LO_ROM = "LoROM"
    HI_ROM = "HiROM"
    EX_HI_ROM = "ExHiROM"
    EX_LO_ROM = "ExLoROM"
    SUPER_FX = "SuperFX"
    SA1_ROM = "SA-1"
    EX_SA1_ROM = "ExSA-1"
    SUPER_MMC = "SuperMMC"

    @classmethod
    def from_name(cls, name: str) -> "RomMapMode":
        key = name.strip().lower().replace("-", "").replace("_", "")
        for mode in cls:
            if key in (mode.value.lower().replace("-", ""), mode.name.lower().replace("_", "")):
                return mode
        raise ValueError(f"unknown map mode: {name}")


class RomSpeed(Enum):
    SLOW_ROM = "SlowROM"
    FAST_ROM = "FastROM"
    UNKNOWN = "Unknown"


BANK_SIZE_LO = 0x8000


def _lorom_pc_to_snes(offset: int) -> int:
    return ((offset & 0x3F8000) << 1) | 0x8000 | (offset & 0x7FFF)


def _lorom_snes_to_pc(address: int) -> int:
    return ((address & 0x7F0000) >> 1) | (address & 0x7FFF)


def unmirrored_offset(offset: int, size: int) -> int:
    """Fold ``offset`` back into an image of ``size`` bytes the way mirrors repeat."""

    if offset < size:
        return offset
    repeat_size = BANK_SIZE_LO
    while repeat_size < size:
        repeat_size <<= 1
    repeated = offset % repeat_size
    if repeated < size:
        return repeated
    # Non power-of-two images mirror their trailing chunk.
    smaller = BANK_SIZE_LO
    while size % (smaller << 1) == 0:
        smaller <<= 1
    while repeated >= size:
        repeated -= smaller
    return repeated


def convert_pc_to_snes(offset: int, mode: RomMapMode, speed: RomSpeed = RomSpeed.SLOW_ROM) -> int:
    if offset < 0:
        return -1
    fast = speed is RomSpeed.FAST_ROM

    if mode is RomMapMode.LO_ROM:
        if offset >= 0x400000:
            return -1
        address = _lorom_pc_to_snes(offset)
        if fast or address >= 0x7E0000:
            address |= 0x800000
        return address

    if mode in (RomMapMode.HI_ROM, RomMapMode.SUPER_MMC):
        if offset >= 0x400000:
            return -1
        address = offset | 0x400000
        if fast:
            address |= 0x800000
        return address

    if mode is RomMapMode.EX_HI_ROM:
        if offset < 0x400000:
            return offset | 0xC00000
        if offset < 0x7E0000:
            return offset
        return -1

    if mode is RomMapMode.EX_LO_ROM:
        if offset < 0x400000:
            return _lorom_pc_to_snes(offset) | 0x800000
        if offset < 0x7E0000:
            return _lorom_pc_to_snes(offset - 0x400000)
        return -1

    if mode in (RomMapMode.SA1_ROM, RomMapMode.EX_SA1_ROM):
        if offset < 0x200000:
            return _lorom_pc_to_snes(offset)
        if offset < 0x400000:
            return _lorom_pc_to_snes(offset) + 0x400000
        if mode is RomMapMode.EX_SA1_ROM and offset < 0x800000:
            return offset + 0x800000
        return -1

    if mode is RomMapMode.SUPER_FX:
        if offset < 0x200000:
            return _lorom_pc_to_snes(offset)
        if offset < 0x400000:
            return _lorom_pc_to_snes(offset - 0x200000) | 0x800000
        if offset < 0x800000:
            return (offset - 0x400000) | 0xC00000
        return -1

    return -1


def convert_snes_to_pc(address: int, mode: RomMapMode, size: int) -> int:
    if address < 0 or address > 0xFFFFFF or size <= 0:
        return -1

    # WRAM
    if (address & 0xFE0000) == 0x7E0000:
        return -1
    # WRAM mirror and I/O in the system banks
    if (address & 0x400000) == 0 and (address & 0x8000) == 0:
        return -1

    if mode is RomMapMode.LO_ROM:
        if (address & 0x700000) == 0x700000 and (address & 0x8000) == 0:
            return -1
        return unmirrored_offset(_lorom_snes_to_pc(address), size)

    if mode in (RomMapMode.HI_ROM, RomMapMode.SUPER_MMC):
        return unmirrored_offset(address & 0x3FFFFF, size)

    if mode is RomMapMode.EX_HI_ROM:
        return unmirrored_offset(((~address & 0x800000) >> 1) | (address & 0x3FFFFF), size)

    if mode is RomMapMode.EX_LO_ROM:
        if (address & 0x700000) == 0x700000 and (address & 0x8000) == 0:
            return -1
        return unmirrored_offset((((address ^ 0x800000) & 0xFF0000) >> 1) | (address & 0x7FFF), size)

    if mode in (RomMapMode.SA1_ROM, RomMapMode.EX_SA1_ROM):
        # BW-RAM
        if 0x400000 <= address <= 0x7FFFFF:
            return -1
        if address >= 0xC00000:
            if mode is RomMapMode.EX_SA1_ROM:
                return unmirrored_offset(address & 0x7FFFFF, size)
            return unmirrored_offset(address & 0x3FFFFF, size)
        if address >= 0x800000:
            address -= 0x400000
        if (address & 0x8000) == 0:
            return -1
        return unmirrored_offset(_lorom_snes_to_pc(address), size)

    if mode is RomMapMode.SUPER_FX:
        # GSU RAM
        if 0x600000 <= address <= 0x7FFFFF:
            return -1
        if address < 0x400000:
            return unmirrored_offset(_lorom_snes_to_pc(address), size)
        if address < 0x600000:
            return unmirrored_offset(address & 0x3FFFFF, size)
        if address < 0xC00000:
            return 0x200000 + unmirrored_offset(_lorom_snes_to_pc(address), size)
        return 0x400000 + unmirrored_offset(address & 0x3FFFFF, size)

    return -1
