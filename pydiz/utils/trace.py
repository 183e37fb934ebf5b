"""Ring buffer of recent decode steps for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .debug import debug_log


@dataclass
class StepEntry:
    offset: int
    snes_address: int
    opcode: int | None
    mnemonic: str
    direct_page: int
    data_bank: int
    x_flag: bool
    m_flag: bool
    next_offset: int
    note: str = ""


class StepRecorder:
    """Ring buffer that stores the most recent ``step`` results."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[StepEntry | None] = [None] * capacity
        self._index = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def record_step(
        self,
        offset: int,
        snes_address: int,
        opcode: int | None,
        context,
        next_offset: int,
        *,
        mnemonic: str = "",
        note: str = "",
    ) -> None:
        entry = StepEntry(
            offset=offset,
            snes_address=snes_address,
            opcode=None if opcode is None else opcode & 0xFF,
            mnemonic=mnemonic,
            direct_page=context.direct_page & 0xFFFF,
            data_bank=context.data_bank & 0xFF,
            x_flag=bool(context.x_flag),
            m_flag=bool(context.m_flag),
            next_offset=next_offset,
            note=note,
        )
        self._append(entry)

    def entries(self, limit: int | None = None) -> Iterable[StepEntry]:
        count = self._size if limit is None else min(self._size, max(limit, 0))
        for offset in range(count):
            index = (self._index - count + offset) % self._capacity
            entry = self._entries[index]
            if entry is not None:
                yield entry

    def last_entry(self) -> StepEntry | None:
        if self._size == 0:
            return None
        index = (self._index - 1) % self._capacity
        return self._entries[index]

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        lines: list[str] = []
        for entry in self.entries(limit):
            opcode = "--" if entry.opcode is None else f"{entry.opcode:02X}"
            mnemonic = entry.mnemonic or "?"
            snes = "------" if entry.snes_address < 0 else f"{entry.snes_address:06X}"
            flags = ("M" if entry.m_flag else "m") + ("X" if entry.x_flag else "x")
            note = f" note={entry.note}" if entry.note else ""
            line = (
                f"pc={entry.offset:06X} snes={snes} opcode={opcode} {mnemonic:<3} "
                f"D={entry.direct_page:04X} B={entry.data_bank:02X} {flags} "
                f"next={entry.next_offset:06X}{note}"
            )
            lines.append(line)
        return lines

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)

    def _append(self, entry: StepEntry) -> None:
        self._entries[self._index] = entry
        self._index = (self._index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
