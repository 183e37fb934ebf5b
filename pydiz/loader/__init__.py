"""Loaders for SNES ROM files."""

from __future__ import annotations

from .image import RomImage
from .rom import RomFormatError, load_rom, load_rom_from_path

__all__ = [
    "RomImage",
    "RomFormatError",
    "load_rom",
    "load_rom_from_path",
]
