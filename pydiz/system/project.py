"""Disassembly project assembly."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from pydiz.analysis import VectorEntry, auto_step, seed_vectors
from pydiz.cpu import CPU65C816
from pydiz.data import FlagType, RomData, RomMapMode, RomSpeed
from pydiz.loader import RomImage
from pydiz.utils import StepRecorder, debug_enabled


@dataclass
class ProjectConfig:
    """Runtime configuration for a disassembly project."""

    map_mode: Optional[RomMapMode] = None
    speed: Optional[RomSpeed] = None
    trace_capacity: int = 0


@dataclass
class Project:
    """Aggregates the ROM store, the CPU analyser and optional tracing."""

    data: RomData
    cpu: CPU65C816
    title: str = ""
    recorder: StepRecorder | None = None

    def analyze_from_vectors(self, *, limit_per_vector: int = 0x10000) -> List[VectorEntry]:
        """Seed the interrupt vectors and walk the code reachable from each."""

        entries = seed_vectors(self.data)
        for entry in entries:
            auto_step(self.cpu, entry.offset, limit=limit_per_vector, recorder=self.recorder)
        return entries

    def analyze_from(self, offset: int, *, harsh: bool = False, amount: int = 0x200) -> int:
        return auto_step(self.cpu, offset, harsh=harsh, amount=amount, recorder=self.recorder)

    def iter_opcode_offsets(self, start: int = 0, end: int | None = None) -> Iterator[int]:
        stop = self.data.size if end is None else min(end, self.data.size)
        for offset in range(max(start, 0), stop):
            if self.data.get_flag(offset) is FlagType.OPCODE:
                yield offset

    def listing_line(self, offset: int) -> str:
        """Render ``address  bytes  instruction`` for the opcode at ``offset``.

        A label on the address is printed on its own line first; a comment is
        appended after ``;``.
        """

        data = self.data
        length = self.cpu.get_instruction_length(offset)
        raw = data.rom[offset : offset + length]
        address = data.convert_pc_to_snes(offset)
        label = data.get_label_name(address) if address >= 0 else ""
        comment = data.get_comment(address) if address >= 0 else ""
        prefix = f"{label}:\n" if label else ""
        suffix = f"  ; {comment}" if comment else ""
        return (
            f"{prefix}{address & 0xFFFFFF:06X}  {raw.hex(' ').upper():<11}  "
            f"{self.cpu.get_instruction(offset)}{suffix}"
        )


def create_project(rom: bytes, config: ProjectConfig | None = None) -> Project:
    """Construct a project around raw ROM bytes."""

    config = config or ProjectConfig()
    data = RomData(
        rom,
        map_mode=config.map_mode or RomMapMode.LO_ROM,
        speed=config.speed or RomSpeed.SLOW_ROM,
    )
    return _assemble(data, config)


def create_project_from_image(image: RomImage, config: ProjectConfig | None = None) -> Project:
    """Construct a project from a loaded image, honouring config overrides."""

    config = config or ProjectConfig()
    speed = config.speed or image.speed
    if speed is RomSpeed.UNKNOWN:
        speed = RomSpeed.SLOW_ROM
    data = RomData(image.data, map_mode=config.map_mode or image.map_mode, speed=speed)
    project = _assemble(data, config)
    project.title = image.title
    return project


def _assemble(data: RomData, config: ProjectConfig) -> Project:
    recorder: StepRecorder | None = None
    if config.trace_capacity > 0:
        recorder = StepRecorder(config.trace_capacity)
    elif debug_enabled("trace"):
        recorder = StepRecorder(512)
    return Project(data=data, cpu=CPU65C816(data), recorder=recorder)
