"""ROM store, per-offset metadata and address mapping."""

from .mapping import RomMapMode, RomSpeed, convert_pc_to_snes, convert_snes_to_pc, unmirrored_offset
from .rom import (
    CODE_FLAGS,
    EMULATION_CONTEXT,
    AnalysisError,
    DataError,
    FlagType,
    InOutPoint,
    OffsetMetadata,
    ProcessorContext,
    RomData,
)

__all__ = [
    "AnalysisError",
    "CODE_FLAGS",
    "DataError",
    "EMULATION_CONTEXT",
    "FlagType",
    "InOutPoint",
    "OffsetMetadata",
    "ProcessorContext",
    "RomData",
    "RomMapMode",
    "RomSpeed",
    "convert_pc_to_snes",
    "convert_snes_to_pc",
    "unmirrored_offset",
]
