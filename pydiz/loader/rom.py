"""SNES ROM file loader with internal header detection."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional

from pydiz.data import RomMapMode, RomSpeed
from pydiz.utils import debug_enabled, debug_log

from .image import RomImage


class RomFormatError(RuntimeError):
    """Raised when a file cannot be used as a SNES ROM image."""


COPIER_HEADER_SIZE = 0x200
MIN_ROM_SIZE = 0x8000

# Internal header fields, relative to the header start ($xxFFC0 / $xx7FC0).
HEADER_TITLE = 0x00
HEADER_TITLE_LENGTH = 21
HEADER_MAP_MODE = 0x15
HEADER_CHIPSET = 0x16
HEADER_COMPLEMENT = 0x1C
HEADER_CHECKSUM = 0x1E
HEADER_RESET_VECTOR = 0x3C
HEADER_SIZE = 0x40

_CANDIDATES = (
    (0x007FC0, RomMapMode.LO_ROM),
    (0x00FFC0, RomMapMode.HI_ROM),
    (0x40FFC0, RomMapMode.EX_HI_ROM),
)

# Low nibble of the map mode byte.
_MAP_NIBBLES = {
    0x0: RomMapMode.LO_ROM,
    0x1: RomMapMode.HI_ROM,
    0x2: RomMapMode.EX_LO_ROM,
    0x3: RomMapMode.SA1_ROM,
    0x5: RomMapMode.EX_HI_ROM,
    0xA: RomMapMode.SUPER_MMC,
}

_SUPER_FX_CHIPSETS = range(0x13, 0x1B)


@dataclass
class _HeaderCandidate:
    offset: int
    layout: RomMapMode
    score: int


def load_rom(stream: BinaryIO, *, map_mode: Optional[RomMapMode] = None) -> RomImage:
    """Load a ROM image from ``stream``; ``map_mode`` overrides header detection."""

    loader = _RomLoader(stream.read(), map_mode)
    return loader.load()


def load_rom_from_path(path: Path, *, map_mode: Optional[RomMapMode] = None) -> RomImage:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, map_mode=map_mode)


class _RomLoader:
    def __init__(self, raw: bytes, map_mode: Optional[RomMapMode]) -> None:
        self._raw = raw
        self._map_mode = map_mode

    def load(self) -> RomImage:
        if not self._raw:
            raise RomFormatError("ROM image is empty")

        copier_header = len(self._raw) % 0x400 == COPIER_HEADER_SIZE
        data = self._raw[COPIER_HEADER_SIZE:] if copier_header else self._raw
        if len(data) < MIN_ROM_SIZE:
            raise RomFormatError(f"ROM image too small: {len(data)} bytes (minimum {MIN_ROM_SIZE})")

        image = RomImage(data=bytes(data), copier_header=copier_header)
        best = self._best_candidate(image.data)
        if best is not None:
            image.header_offset = best.offset
            self._apply_header(image, best)
        if self._map_mode is not None:
            image.map_mode = self._map_mode

        if debug_enabled("loader"):
            debug_log(
                "loader",
                "title=%r map=%s speed=%s header=%06x copier=%s",
                image.title,
                image.map_mode.value,
                image.speed.value,
                image.header_offset & 0xFFFFFF,
                copier_header,
            )
        return image

    def _best_candidate(self, data: bytes) -> _HeaderCandidate | None:
        candidates: List[_HeaderCandidate] = []
        for offset, layout in _CANDIDATES:
            if offset + HEADER_SIZE > len(data):
                continue
            candidates.append(_HeaderCandidate(offset, layout, _score_header(data, offset, layout)))
        if not candidates:
            return None
        # max() keeps the first of equal scores, so LoROM wins ties.
        best = max(candidates, key=lambda candidate: candidate.score)
        return best if best.score > 0 else None

    def _apply_header(self, image: RomImage, candidate: _HeaderCandidate) -> None:
        data = image.data
        base = candidate.offset
        title = data[base + HEADER_TITLE : base + HEADER_TITLE + HEADER_TITLE_LENGTH]
        image.title = title.decode("ascii", errors="replace").rstrip(" \x00")

        map_byte = data[base + HEADER_MAP_MODE]
        chipset = data[base + HEADER_CHIPSET]
        mode = _MAP_NIBBLES.get(map_byte & 0x0F, candidate.layout)
        if mode is RomMapMode.LO_ROM and chipset in _SUPER_FX_CHIPSETS:
            mode = RomMapMode.SUPER_FX
        if mode is RomMapMode.SA1_ROM and len(data) > 0x400000:
            mode = RomMapMode.EX_SA1_ROM
        image.map_mode = mode
        image.speed = RomSpeed.FAST_ROM if map_byte & 0x10 else RomSpeed.SLOW_ROM


def _score_header(data: bytes, base: int, layout: RomMapMode) -> int:
    score = 0
    (complement,) = struct.unpack_from("<H", data, base + HEADER_COMPLEMENT)
    (checksum,) = struct.unpack_from("<H", data, base + HEADER_CHECKSUM)
    if complement ^ checksum == 0xFFFF:
        score += 4

    map_byte = data[base + HEADER_MAP_MODE]
    if map_byte & 0xE0 == 0x20:
        score += 1
        nibble_mode = _MAP_NIBBLES.get(map_byte & 0x0F)
        if nibble_mode is layout:
            score += 2
        elif layout is RomMapMode.LO_ROM and nibble_mode in (
            RomMapMode.SA1_ROM,
            RomMapMode.EX_LO_ROM,
        ):
            score += 2

    title = data[base + HEADER_TITLE : base + HEADER_TITLE + HEADER_TITLE_LENGTH]
    if title and all(0x20 <= byte < 0x7F for byte in title):
        score += 1

    (reset,) = struct.unpack_from("<H", data, base + HEADER_RESET_VECTOR)
    if reset >= 0x8000:
        score += 1
    return score
