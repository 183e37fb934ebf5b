"""ROM image and per-offset analysis metadata.

``RomData`` is the store the CPU analysis reads and writes: the immutable ROM
bytes, one :class:`OffsetMetadata` record per byte, and the label table keyed
by SNES address. Offsets are flat file offsets ("PC"); addresses are 24-bit
SNES bus addresses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Dict, Iterator, List

from .mapping import RomMapMode, RomSpeed, convert_pc_to_snes, convert_snes_to_pc


class DataError(Exception):
    """Raised when the metadata store is misconfigured or used incorrectly."""


class AnalysisError(DataError):
    """Raised when a read falls outside the ROM image."""


class FlagType(Enum):
    """Classification of a single ROM byte."""

    UNREACHED = 0x00
    OPCODE = 0x10
    OPERAND = 0x11
    DATA_8BIT = 0x20
    GRAPHICS = 0x21
    MUSIC = 0x22
    EMPTY = 0x23
    DATA_16BIT = 0x30
    POINTER_16BIT = 0x31
    DATA_24BIT = 0x40
    POINTER_24BIT = 0x41
    DATA_32BIT = 0x50
    POINTER_32BIT = 0x51
    TEXT = 0x60


CODE_FLAGS = frozenset({FlagType.UNREACHED, FlagType.OPCODE, FlagType.OPERAND})


class InOutPoint(IntFlag):
    NONE = 0x00
    IN_POINT = 0x01
    OUT_POINT = 0x02
    END_POINT = 0x04
    READ_POINT = 0x08


@dataclass(frozen=True)
class ProcessorContext:
    """Processor state that determines how an instruction decodes.

    ``x_flag``/``m_flag`` are ``True`` when the index registers or the
    accumulator/memory operands are 8 bits wide.
    """

    direct_page: int = 0x0000
    data_bank: int = 0x00
    x_flag: bool = False
    m_flag: bool = False

    def with_status_mask(self, mask: int, *, set_bits: bool) -> "ProcessorContext":
        """Apply a REP (``set_bits=False``) or SEP (``set_bits=True``) mask."""

        x_flag = set_bits if mask & 0x10 else self.x_flag
        m_flag = set_bits if mask & 0x20 else self.m_flag
        return ProcessorContext(self.direct_page, self.data_bank, x_flag, m_flag)


EMULATION_CONTEXT = ProcessorContext(direct_page=0x0000, data_bank=0x00, x_flag=True, m_flag=True)


@dataclass
class OffsetMetadata:
    flag: FlagType = FlagType.UNREACHED
    direct_page: int = 0x0000
    data_bank: int = 0x00
    x_flag: bool = False
    m_flag: bool = False
    in_out: InOutPoint = InOutPoint.NONE


@dataclass
class RomData:
    """Byte-addressable ROM store with analysis metadata."""

    rom: bytes
    map_mode: RomMapMode = RomMapMode.LO_ROM
    speed: RomSpeed = RomSpeed.SLOW_ROM
    labels: Dict[int, str] = field(default_factory=dict)
    comments: Dict[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.rom:
            raise DataError("ROM image must not be empty")
        self.rom = bytes(self.rom)
        self._metadata: List[OffsetMetadata] = [OffsetMetadata() for _ in range(len(self.rom))]

    def __len__(self) -> int:
        return len(self.rom)

    @property
    def size(self) -> int:
        return len(self.rom)

    def contains(self, offset: int) -> bool:
        return 0 <= offset < len(self.rom)

    # ------------------------------------------------------------------
    # ROM reads

    def get_rom_byte(self, offset: int) -> int:
        self._check_range(offset, 1)
        return self.rom[offset]

    def get_rom_word(self, offset: int) -> int:
        self._check_range(offset, 2)
        return self.rom[offset] | (self.rom[offset + 1] << 8)

    def get_rom_long(self, offset: int) -> int:
        self._check_range(offset, 3)
        return self.rom[offset] | (self.rom[offset + 1] << 8) | (self.rom[offset + 2] << 16)

    # ------------------------------------------------------------------
    # Metadata accessors

    def metadata(self, offset: int) -> OffsetMetadata:
        self._check_range(offset, 1)
        return self._metadata[offset]

    def get_flag(self, offset: int) -> FlagType:
        return self.metadata(offset).flag

    def set_flag(self, offset: int, flag: FlagType) -> None:
        self.metadata(offset).flag = flag

    def get_direct_page(self, offset: int) -> int:
        return self.metadata(offset).direct_page

    def set_direct_page(self, offset: int, value: int) -> None:
        self.metadata(offset).direct_page = value & 0xFFFF

    def get_data_bank(self, offset: int) -> int:
        return self.metadata(offset).data_bank

    def set_data_bank(self, offset: int, value: int) -> None:
        self.metadata(offset).data_bank = value & 0xFF

    def get_x_flag(self, offset: int) -> bool:
        return self.metadata(offset).x_flag

    def set_x_flag(self, offset: int, value: bool) -> None:
        self.metadata(offset).x_flag = bool(value)

    def get_m_flag(self, offset: int) -> bool:
        return self.metadata(offset).m_flag

    def set_m_flag(self, offset: int, value: bool) -> None:
        self.metadata(offset).m_flag = bool(value)

    def get_mx_flags(self, offset: int) -> int:
        entry = self.metadata(offset)
        return (0x20 if entry.m_flag else 0) | (0x10 if entry.x_flag else 0)

    def set_mx_flags(self, offset: int, value: int) -> None:
        entry = self.metadata(offset)
        entry.m_flag = (value & 0x20) != 0
        entry.x_flag = (value & 0x10) != 0

    def get_context(self, offset: int) -> ProcessorContext:
        entry = self.metadata(offset)
        return ProcessorContext(entry.direct_page, entry.data_bank, entry.x_flag, entry.m_flag)

    def set_context(self, offset: int, context: ProcessorContext) -> None:
        entry = self.metadata(offset)
        entry.direct_page = context.direct_page & 0xFFFF
        entry.data_bank = context.data_bank & 0xFF
        entry.x_flag = context.x_flag
        entry.m_flag = context.m_flag

    def get_in_out_point(self, offset: int) -> InOutPoint:
        return self.metadata(offset).in_out

    def set_in_out_point(self, offset: int, point: InOutPoint) -> None:
        entry = self.metadata(offset)
        entry.in_out = entry.in_out | point

    def clear_in_out_points(self) -> None:
        for entry in self._metadata:
            entry.in_out = InOutPoint.NONE

    def offsets_with_flag(self, flag: FlagType) -> Iterator[int]:
        for offset, entry in enumerate(self._metadata):
            if entry.flag is flag:
                yield offset

    # ------------------------------------------------------------------
    # Bulk marking

    def mark(self, offset: int, flag: FlagType, count: int = 1) -> int:
        """Set ``flag`` on up to ``count`` bytes; return the offset after the run."""

        end = self._clamp_run(offset, count)
        for index in range(offset, end):
            self._metadata[index].flag = flag
        return end

    def mark_data_bank(self, offset: int, value: int, count: int = 1) -> int:
        end = self._clamp_run(offset, count)
        for index in range(offset, end):
            self._metadata[index].data_bank = value & 0xFF
        return end

    def mark_direct_page(self, offset: int, value: int, count: int = 1) -> int:
        end = self._clamp_run(offset, count)
        for index in range(offset, end):
            self._metadata[index].direct_page = value & 0xFFFF
        return end

    def mark_x_flag(self, offset: int, value: bool, count: int = 1) -> int:
        end = self._clamp_run(offset, count)
        for index in range(offset, end):
            self._metadata[index].x_flag = bool(value)
        return end

    def mark_m_flag(self, offset: int, value: bool, count: int = 1) -> int:
        end = self._clamp_run(offset, count)
        for index in range(offset, end):
            self._metadata[index].m_flag = bool(value)
        return end

    # ------------------------------------------------------------------
    # Labels and comments

    def get_label_name(self, address: int) -> str:
        return self.labels.get(address, "")

    def add_label(self, address: int, name: str | None) -> None:
        if not name:
            self.labels.pop(address, None)
            return
        self.labels[address] = name

    def get_comment(self, address: int) -> str:
        return self.comments.get(address, "")

    def add_comment(self, address: int, text: str | None) -> None:
        if not text:
            self.comments.pop(address, None)
            return
        self.comments[address] = text

    # ------------------------------------------------------------------
    # Address mapping

    def convert_pc_to_snes(self, offset: int) -> int:
        if not self.contains(offset):
            return -1
        return convert_pc_to_snes(offset, self.map_mode, self.speed)

    def convert_snes_to_pc(self, address: int) -> int:
        offset = convert_snes_to_pc(address, self.map_mode, len(self.rom))
        if not self.contains(offset):
            return -1
        return offset

    # ------------------------------------------------------------------

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or offset + length > len(self.rom):
            raise AnalysisError(
                f"read of {length} byte(s) at {offset:#08x} outside ROM of {len(self.rom):#x} bytes")

    def _clamp_run(self, offset: int, count: int) -> int:
        if count < 0:
            raise DataError("count must not be negative")
        self._check_range(offset, 1)
        return min(offset + count, len(self.rom))
