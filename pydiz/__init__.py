"""Static 65816 (SNES) disassembly analysis.

The ``cpu`` package decodes instructions and propagates processor context,
``data`` holds the ROM image and per-byte metadata, ``analysis`` drives
decoding across a ROM, ``loader`` reads ROM files and ``system`` wires the
pieces into a project used by ``run.py``.
"""

from __future__ import annotations

from . import analysis, cpu, data, loader, system, utils

__all__: list[str] = [
    "analysis",
    "cpu",
    "data",
    "loader",
    "system",
    "utils",
]
