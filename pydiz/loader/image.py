"""ROM image metadata produced by the loader."""

from __future__ import annotations

from dataclasses import dataclass

from pydiz.data import RomMapMode, RomSpeed


@dataclass
class RomImage:
    """Raw ROM bytes plus what the internal header revealed about them."""

    data: bytes
    title: str = ""
    map_mode: RomMapMode = RomMapMode.LO_ROM
    speed: RomSpeed = RomSpeed.UNKNOWN
    header_offset: int = -1
    copier_header: bool = False

    def __len__(self) -> int:
        return len(self.data)
