"""Opcode metadata for the 65816 (SNES) CPU."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, FrozenSet, Iterable, List, Mapping, Sequence


class AddressingMode(Enum):
    """Operand shapes of the 65816 instruction set.

    ``IMMEDIATE_X`` and ``IMMEDIATE_M`` only appear in the opcode table; they
    collapse to ``IMMEDIATE_8`` or ``IMMEDIATE_16`` once the recorded index or
    accumulator width flag is known (see :func:`resolve_mode`).
    """

    IMPLIED = auto()
    ACCUMULATOR = auto()
    CONSTANT_8 = auto()
    IMMEDIATE_8 = auto()
    IMMEDIATE_16 = auto()
    IMMEDIATE_X = auto()
    IMMEDIATE_M = auto()
    DIRECT = auto()
    DIRECT_X = auto()
    DIRECT_Y = auto()
    STACK_RELATIVE = auto()
    DIRECT_INDIRECT = auto()
    DIRECT_X_INDIRECT = auto()
    DIRECT_INDIRECT_Y = auto()
    STACK_RELATIVE_INDIRECT_Y = auto()
    DIRECT_LONG_INDIRECT = auto()
    DIRECT_LONG_INDIRECT_Y = auto()
    ABSOLUTE = auto()
    ABSOLUTE_X = auto()
    ABSOLUTE_Y = auto()
    ABSOLUTE_INDIRECT = auto()
    ABSOLUTE_X_INDIRECT = auto()
    ABSOLUTE_LONG_INDIRECT = auto()
    LONG = auto()
    LONG_X = auto()
    BLOCK_MOVE = auto()
    RELATIVE_8 = auto()
    RELATIVE_16 = auto()


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single 65816 opcode."""

    opcode: int
    mnemonic: str
    mode: AddressingMode

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xFF:
            raise ValueError(f"opcode out of range: {self.opcode}")
        if not self.mnemonic:
            raise ValueError("mnemonic must not be empty")


class OpcodeTable:
    """Mutable builder for the 256-entry instruction table."""

    _TABLE_SIZE: Final[int] = 0x100

    def __init__(self) -> None:
        self._table: List[Instruction | None] = [None] * self._TABLE_SIZE

    def register(self, instruction: Instruction) -> None:
        opcode = instruction.opcode
        if self._table[opcode] is not None:
            existing = self._table[opcode]
            raise ValueError(
                f"opcode {opcode:#04x} already registered as {existing.mnemonic}")
        self._table[opcode] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Sequence[Instruction]:
        missing = [index for index, entry in enumerate(self._table) if entry is None]
        if missing:
            raise ValueError(f"opcode table incomplete, first gap at {missing[0]:#04x}")
        return tuple(entry for entry in self._table if entry is not None)


def build_instruction_table(instructions: Iterable[Instruction]) -> Sequence[Instruction]:
    """Build a complete 256-entry instruction lookup table."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    Instruction(0x00, "BRK", AddressingMode.CONSTANT_8),
    Instruction(0x01, "ORA", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0x02, "COP", AddressingMode.CONSTANT_8),
    Instruction(0x03, "ORA", AddressingMode.STACK_RELATIVE),
    Instruction(0x04, "TSB", AddressingMode.DIRECT),
    Instruction(0x05, "ORA", AddressingMode.DIRECT),
    Instruction(0x06, "ASL", AddressingMode.DIRECT),
    Instruction(0x07, "ORA", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0x08, "PHP", AddressingMode.IMPLIED),
    Instruction(0x09, "ORA", AddressingMode.IMMEDIATE_M),
    Instruction(0x0A, "ASL", AddressingMode.ACCUMULATOR),
    Instruction(0x0B, "PHD", AddressingMode.IMPLIED),
    Instruction(0x0C, "TSB", AddressingMode.ABSOLUTE),
    Instruction(0x0D, "ORA", AddressingMode.ABSOLUTE),
    Instruction(0x0E, "ASL", AddressingMode.ABSOLUTE),
    Instruction(0x0F, "ORA", AddressingMode.LONG),
    Instruction(0x10, "BPL", AddressingMode.RELATIVE_8),
    Instruction(0x11, "ORA", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0x12, "ORA", AddressingMode.DIRECT_INDIRECT),
    Instruction(0x13, "ORA", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0x14, "TRB", AddressingMode.DIRECT),
    Instruction(0x15, "ORA", AddressingMode.DIRECT_X),
    Instruction(0x16, "ASL", AddressingMode.DIRECT_X),
    Instruction(0x17, "ORA", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0x18, "CLC", AddressingMode.IMPLIED),
    Instruction(0x19, "ORA", AddressingMode.ABSOLUTE_Y),
    Instruction(0x1A, "INC", AddressingMode.ACCUMULATOR),
    Instruction(0x1B, "TCS", AddressingMode.IMPLIED),
    Instruction(0x1C, "TRB", AddressingMode.ABSOLUTE),
    Instruction(0x1D, "ORA", AddressingMode.ABSOLUTE_X),
    Instruction(0x1E, "ASL", AddressingMode.ABSOLUTE_X),
    Instruction(0x1F, "ORA", AddressingMode.LONG_X),
    Instruction(0x20, "JSR", AddressingMode.ABSOLUTE),
    Instruction(0x21, "AND", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0x22, "JSL", AddressingMode.LONG),
    Instruction(0x23, "AND", AddressingMode.STACK_RELATIVE),
    Instruction(0x24, "BIT", AddressingMode.DIRECT),
    Instruction(0x25, "AND", AddressingMode.DIRECT),
    Instruction(0x26, "ROL", AddressingMode.DIRECT),
    Instruction(0x27, "AND", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0x28, "PLP", AddressingMode.IMPLIED),
    Instruction(0x29, "AND", AddressingMode.IMMEDIATE_M),
    Instruction(0x2A, "ROL", AddressingMode.ACCUMULATOR),
    Instruction(0x2B, "PLD", AddressingMode.IMPLIED),
    Instruction(0x2C, "BIT", AddressingMode.ABSOLUTE),
    Instruction(0x2D, "AND", AddressingMode.ABSOLUTE),
    Instruction(0x2E, "ROL", AddressingMode.ABSOLUTE),
    Instruction(0x2F, "AND", AddressingMode.LONG),
    Instruction(0x30, "BMI", AddressingMode.RELATIVE_8),
    Instruction(0x31, "AND", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0x32, "AND", AddressingMode.DIRECT_INDIRECT),
    Instruction(0x33, "AND", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0x34, "BIT", AddressingMode.DIRECT_X),
    Instruction(0x35, "AND", AddressingMode.DIRECT_X),
    Instruction(0x36, "ROL", AddressingMode.DIRECT_X),
    Instruction(0x37, "AND", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0x38, "SEC", AddressingMode.IMPLIED),
    Instruction(0x39, "AND", AddressingMode.ABSOLUTE_Y),
    Instruction(0x3A, "DEC", AddressingMode.ACCUMULATOR),
    Instruction(0x3B, "TSC", AddressingMode.IMPLIED),
    Instruction(0x3C, "BIT", AddressingMode.ABSOLUTE_X),
    Instruction(0x3D, "AND", AddressingMode.ABSOLUTE_X),
    Instruction(0x3E, "ROL", AddressingMode.ABSOLUTE_X),
    Instruction(0x3F, "AND", AddressingMode.LONG_X),
    Instruction(0x40, "RTI", AddressingMode.IMPLIED),
    Instruction(0x41, "EOR", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0x42, "WDM", AddressingMode.CONSTANT_8),
    Instruction(0x43, "EOR", AddressingMode.STACK_RELATIVE),
    Instruction(0x44, "MVP", AddressingMode.BLOCK_MOVE),
    Instruction(0x45, "EOR", AddressingMode.DIRECT),
    Instruction(0x46, "LSR", AddressingMode.DIRECT),
    Instruction(0x47, "EOR", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0x48, "PHA", AddressingMode.IMPLIED),
    Instruction(0x49, "EOR", AddressingMode.IMMEDIATE_M),
    Instruction(0x4A, "LSR", AddressingMode.ACCUMULATOR),
    Instruction(0x4B, "PHK", AddressingMode.IMPLIED),
    Instruction(0x4C, "JMP", AddressingMode.ABSOLUTE),
    Instruction(0x4D, "EOR", AddressingMode.ABSOLUTE),
    Instruction(0x4E, "LSR", AddressingMode.ABSOLUTE),
    Instruction(0x4F, "EOR", AddressingMode.LONG),
    Instruction(0x50, "BVC", AddressingMode.RELATIVE_8),
    Instruction(0x51, "EOR", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0x52, "EOR", AddressingMode.DIRECT_INDIRECT),
    Instruction(0x53, "EOR", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0x54, "MVN", AddressingMode.BLOCK_MOVE),
    Instruction(0x55, "EOR", AddressingMode.DIRECT_X),
    Instruction(0x56, "LSR", AddressingMode.DIRECT_X),
    Instruction(0x57, "EOR", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0x58, "CLI", AddressingMode.IMPLIED),
    Instruction(0x59, "EOR", AddressingMode.ABSOLUTE_Y),
    Instruction(0x5A, "PHY", AddressingMode.IMPLIED),
    Instruction(0x5B, "TCD", AddressingMode.IMPLIED),
    Instruction(0x5C, "JML", AddressingMode.LONG),
    Instruction(0x5D, "EOR", AddressingMode.ABSOLUTE_X),
    Instruction(0x5E, "LSR", AddressingMode.ABSOLUTE_X),
    Instruction(0x5F, "EOR", AddressingMode.LONG_X),
    Instruction(0x60, "RTS", AddressingMode.IMPLIED),
    Instruction(0x61, "ADC", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0x62, "PER", AddressingMode.RELATIVE_16),
    Instruction(0x63, "ADC", AddressingMode.STACK_RELATIVE),
    Instruction(0x64, "STZ", AddressingMode.DIRECT),
    Instruction(0x65, "ADC", AddressingMode.DIRECT),
    Instruction(0x66, "ROR", AddressingMode.DIRECT),
    Instruction(0x67, "ADC", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0x68, "PLA", AddressingMode.IMPLIED),
    Instruction(0x69, "ADC", AddressingMode.IMMEDIATE_M),
    Instruction(0x6A, "ROR", AddressingMode.ACCUMULATOR),
    Instruction(0x6B, "RTL", AddressingMode.IMPLIED),
    Instruction(0x6C, "JMP", AddressingMode.ABSOLUTE_INDIRECT),
    Instruction(0x6D, "ADC", AddressingMode.ABSOLUTE),
    Instruction(0x6E, "ROR", AddressingMode.ABSOLUTE),
    Instruction(0x6F, "ADC", AddressingMode.LONG),
    Instruction(0x70, "BVS", AddressingMode.RELATIVE_8),
    Instruction(0x71, "ADC", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0x72, "ADC", AddressingMode.DIRECT_INDIRECT),
    Instruction(0x73, "ADC", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0x74, "STZ", AddressingMode.DIRECT_X),
    Instruction(0x75, "ADC", AddressingMode.DIRECT_X),
    Instruction(0x76, "ROR", AddressingMode.DIRECT_X),
    Instruction(0x77, "ADC", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0x78, "SEI", AddressingMode.IMPLIED),
    Instruction(0x79, "ADC", AddressingMode.ABSOLUTE_Y),
    Instruction(0x7A, "PLY", AddressingMode.IMPLIED),
    Instruction(0x7B, "TDC", AddressingMode.IMPLIED),
    Instruction(0x7C, "JMP", AddressingMode.ABSOLUTE_X_INDIRECT),
    Instruction(0x7D, "ADC", AddressingMode.ABSOLUTE_X),
    Instruction(0x7E, "ROR", AddressingMode.ABSOLUTE_X),
    Instruction(0x7F, "ADC", AddressingMode.LONG_X),
    Instruction(0x80, "BRA", AddressingMode.RELATIVE_8),
    Instruction(0x81, "STA", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0x82, "BRL", AddressingMode.RELATIVE_16),
    Instruction(0x83, "STA", AddressingMode.STACK_RELATIVE),
    Instruction(0x84, "STY", AddressingMode.DIRECT),
    Instruction(0x85, "STA", AddressingMode.DIRECT),
    Instruction(0x86, "STX", AddressingMode.DIRECT),
    Instruction(0x87, "STA", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0x88, "DEY", AddressingMode.IMPLIED),
    Instruction(0x89, "BIT", AddressingMode.IMMEDIATE_M),
    Instruction(0x8A, "TXA", AddressingMode.IMPLIED),
    Instruction(0x8B, "PHB", AddressingMode.IMPLIED),
    Instruction(0x8C, "STY", AddressingMode.ABSOLUTE),
    Instruction(0x8D, "STA", AddressingMode.ABSOLUTE),
    Instruction(0x8E, "STX", AddressingMode.ABSOLUTE),
    Instruction(0x8F, "STA", AddressingMode.LONG),
    Instruction(0x90, "BCC", AddressingMode.RELATIVE_8),
    Instruction(0x91, "STA", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0x92, "STA", AddressingMode.DIRECT_INDIRECT),
    Instruction(0x93, "STA", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0x94, "STY", AddressingMode.DIRECT_X),
    Instruction(0x95, "STA", AddressingMode.DIRECT_X),
    Instruction(0x96, "STX", AddressingMode.DIRECT_Y),
    Instruction(0x97, "STA", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0x98, "TYA", AddressingMode.IMPLIED),
    Instruction(0x99, "STA", AddressingMode.ABSOLUTE_Y),
    Instruction(0x9A, "TXS", AddressingMode.IMPLIED),
    Instruction(0x9B, "TXY", AddressingMode.IMPLIED),
    Instruction(0x9C, "STZ", AddressingMode.ABSOLUTE),
    Instruction(0x9D, "STA", AddressingMode.ABSOLUTE_X),
    Instruction(0x9E, "STZ", AddressingMode.ABSOLUTE_X),
    Instruction(0x9F, "STA", AddressingMode.LONG_X),
    Instruction(0xA0, "LDY", AddressingMode.IMMEDIATE_X),
    Instruction(0xA1, "LDA", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0xA2, "LDX", AddressingMode.IMMEDIATE_X),
    Instruction(0xA3, "LDA", AddressingMode.STACK_RELATIVE),
    Instruction(0xA4, "LDY", AddressingMode.DIRECT),
    Instruction(0xA5, "LDA", AddressingMode.DIRECT),
    Instruction(0xA6, "LDX", AddressingMode.DIRECT),
    Instruction(0xA7, "LDA", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0xA8, "TAY", AddressingMode.IMPLIED),
    Instruction(0xA9, "LDA", AddressingMode.IMMEDIATE_M),
    Instruction(0xAA, "TAX", AddressingMode.IMPLIED),
    Instruction(0xAB, "PLB", AddressingMode.IMPLIED),
    Instruction(0xAC, "LDY", AddressingMode.ABSOLUTE),
    Instruction(0xAD, "LDA", AddressingMode.ABSOLUTE),
    Instruction(0xAE, "LDX", AddressingMode.ABSOLUTE),
    Instruction(0xAF, "LDA", AddressingMode.LONG),
    Instruction(0xB0, "BCS", AddressingMode.RELATIVE_8),
    Instruction(0xB1, "LDA", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0xB2, "LDA", AddressingMode.DIRECT_INDIRECT),
    Instruction(0xB3, "LDA", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0xB4, "LDY", AddressingMode.DIRECT_X),
    Instruction(0xB5, "LDA", AddressingMode.DIRECT_X),
    Instruction(0xB6, "LDX", AddressingMode.DIRECT_Y),
    Instruction(0xB7, "LDA", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0xB8, "CLV", AddressingMode.IMPLIED),
    Instruction(0xB9, "LDA", AddressingMode.ABSOLUTE_Y),
    Instruction(0xBA, "TSX", AddressingMode.IMPLIED),
    Instruction(0xBB, "TYX", AddressingMode.IMPLIED),
    Instruction(0xBC, "LDY", AddressingMode.ABSOLUTE_X),
    Instruction(0xBD, "LDA", AddressingMode.ABSOLUTE_X),
    Instruction(0xBE, "LDX", AddressingMode.ABSOLUTE_Y),
    Instruction(0xBF, "LDA", AddressingMode.LONG_X),
    Instruction(0xC0, "CPY", AddressingMode.IMMEDIATE_X),
    Instruction(0xC1, "CMP", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0xC2, "REP", AddressingMode.CONSTANT_8),
    Instruction(0xC3, "CMP", AddressingMode.STACK_RELATIVE),
    Instruction(0xC4, "CPY", AddressingMode.DIRECT),
    Instruction(0xC5, "CMP", AddressingMode.DIRECT),
    Instruction(0xC6, "DEC", AddressingMode.DIRECT),
    Instruction(0xC7, "CMP", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0xC8, "INY", AddressingMode.IMPLIED),
    Instruction(0xC9, "CMP", AddressingMode.IMMEDIATE_M),
    Instruction(0xCA, "DEX", AddressingMode.IMPLIED),
    Instruction(0xCB, "WAI", AddressingMode.IMPLIED),
    Instruction(0xCC, "CPY", AddressingMode.ABSOLUTE),
    Instruction(0xCD, "CMP", AddressingMode.ABSOLUTE),
    Instruction(0xCE, "DEC", AddressingMode.ABSOLUTE),
    Instruction(0xCF, "CMP", AddressingMode.LONG),
    Instruction(0xD0, "BNE", AddressingMode.RELATIVE_8),
    Instruction(0xD1, "CMP", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0xD2, "CMP", AddressingMode.DIRECT_INDIRECT),
    Instruction(0xD3, "CMP", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0xD4, "PEI", AddressingMode.DIRECT_INDIRECT),
    Instruction(0xD5, "CMP", AddressingMode.DIRECT_X),
    Instruction(0xD6, "DEC", AddressingMode.DIRECT_X),
    Instruction(0xD7, "CMP", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0xD8, "CLD", AddressingMode.IMPLIED),
    Instruction(0xD9, "CMP", AddressingMode.ABSOLUTE_Y),
    Instruction(0xDA, "PHX", AddressingMode.IMPLIED),
    Instruction(0xDB, "STP", AddressingMode.IMPLIED),
    Instruction(0xDC, "JML", AddressingMode.ABSOLUTE_LONG_INDIRECT),
    Instruction(0xDD, "CMP", AddressingMode.ABSOLUTE_X),
    Instruction(0xDE, "DEC", AddressingMode.ABSOLUTE_X),
    Instruction(0xDF, "CMP", AddressingMode.LONG_X),
    Instruction(0xE0, "CPX", AddressingMode.IMMEDIATE_X),
    Instruction(0xE1, "SBC", AddressingMode.DIRECT_X_INDIRECT),
    Instruction(0xE2, "SEP", AddressingMode.CONSTANT_8),
    Instruction(0xE3, "SBC", AddressingMode.STACK_RELATIVE),
    Instruction(0xE4, "CPX", AddressingMode.DIRECT),
    Instruction(0xE5, "SBC", AddressingMode.DIRECT),
    Instruction(0xE6, "INC", AddressingMode.DIRECT),
    Instruction(0xE7, "SBC", AddressingMode.DIRECT_LONG_INDIRECT),
    Instruction(0xE8, "INX", AddressingMode.IMPLIED),
    Instruction(0xE9, "SBC", AddressingMode.IMMEDIATE_M),
    Instruction(0xEA, "NOP", AddressingMode.IMPLIED),
    Instruction(0xEB, "XBA", AddressingMode.IMPLIED),
    Instruction(0xEC, "CPX", AddressingMode.ABSOLUTE),
    Instruction(0xED, "SBC", AddressingMode.ABSOLUTE),
    Instruction(0xEE, "INC", AddressingMode.ABSOLUTE),
    Instruction(0xEF, "SBC", AddressingMode.LONG),
    Instruction(0xF0, "BEQ", AddressingMode.RELATIVE_8),
    Instruction(0xF1, "SBC", AddressingMode.DIRECT_INDIRECT_Y),
    Instruction(0xF2, "SBC", AddressingMode.DIRECT_INDIRECT),
    Instruction(0xF3, "SBC", AddressingMode.STACK_RELATIVE_INDIRECT_Y),
    Instruction(0xF4, "PEA", AddressingMode.ABSOLUTE),
    Instruction(0xF5, "SBC", AddressingMode.DIRECT_X),
    Instruction(0xF6, "INC", AddressingMode.DIRECT_X),
    Instruction(0xF7, "SBC", AddressingMode.DIRECT_LONG_INDIRECT_Y),
    Instruction(0xF8, "SED", AddressingMode.IMPLIED),
    Instruction(0xF9, "SBC", AddressingMode.ABSOLUTE_Y),
    Instruction(0xFA, "PLX", AddressingMode.IMPLIED),
    Instruction(0xFB, "XCE", AddressingMode.IMPLIED),
    Instruction(0xFC, "JSR", AddressingMode.ABSOLUTE_X_INDIRECT),
    Instruction(0xFD, "SBC", AddressingMode.ABSOLUTE_X),
    Instruction(0xFE, "INC", AddressingMode.ABSOLUTE_X),
    Instruction(0xFF, "SBC", AddressingMode.LONG_X),
)


OPCODE_TABLE: Sequence[Instruction] = build_instruction_table(DEFAULT_INSTRUCTIONS)
MNEMONICS: Sequence[str] = tuple(entry.mnemonic for entry in OPCODE_TABLE)
ADDRESSING_MODES: Sequence[AddressingMode] = tuple(entry.mode for entry in OPCODE_TABLE)

MAX_INSTRUCTION_LENGTH: Final[int] = 4

OP_REP: Final[int] = 0xC2
OP_SEP: Final[int] = 0xE2
OP_PHP: Final[int] = 0x08
OP_PLP: Final[int] = 0x28
OP_JSR: Final[int] = 0x20
OP_JSL: Final[int] = 0x22
OP_RTS: Final[int] = 0x60
OP_RTL: Final[int] = 0x6B

# Processor status bits touched by REP/SEP.
STATUS_X: Final[int] = 0x10
STATUS_M: Final[int] = 0x20

# JMP JML BRA BRL
UNCONDITIONAL_TRANSFERS: FrozenSet[int] = frozenset({0x4C, 0x5C, 0x80, 0x82})
# BPL BMI BVC BVS BCC BCS BNE BEQ
CONDITIONAL_BRANCHES: FrozenSet[int] = frozenset({0x10, 0x30, 0x50, 0x70, 0x90, 0xB0, 0xD0, 0xF0})
CALLS: FrozenSet[int] = frozenset({OP_JSR, OP_JSL})
RETURNS: FrozenSet[int] = frozenset({OP_RTS, OP_RTL})

# Absolute-mode opcodes whose operand stays in the instruction's own bank:
# JSR abs, JMP abs, JMP (abs,X), JSR (abs,X).
PROGRAM_BANK_OPCODES: FrozenSet[int] = frozenset({0x20, 0x4C, 0x7C, 0xFC})

# RTI JMP JML RTS RTL JMP() JMP(,X) BRA BRL STP JML[]
END_POINT_OPCODES: FrozenSet[int] = frozenset(
    {0x40, 0x4C, 0x5C, 0x60, 0x6B, 0x6C, 0x7C, 0x80, 0x82, 0xDB, 0xDC}
)
FLOW_OPCODES: FrozenSet[int] = UNCONDITIONAL_TRANSFERS | CONDITIONAL_BRANCHES | CALLS

# Opcodes that match the read/modify bit patterns yet never mark a read point.
# Plain stores such as STA abs ($8D) stay out of this set: their target is
# still flagged as data the code touches.
READ_POINT_EXCLUDED: FrozenSet[int] = frozenset(
    {0x45, 0x55, 0xF5, 0x4C, 0x5C, 0x6C, 0x7C, 0xDC, 0xFC}
)

# RTI WAI STP SED XCE BRK COP WDM and the indirect jumps the walker cannot follow.
STOP_OPCODES: FrozenSet[int] = frozenset(
    {0x40, 0xCB, 0xDB, 0xF8, 0xFB, 0x00, 0x02, 0x42, 0x6C, 0x7C, 0xDC, 0xFC}
)


_INSTRUCTION_LENGTHS: Mapping[AddressingMode, int] = {
    AddressingMode.IMPLIED: 1,
    AddressingMode.ACCUMULATOR: 1,
    AddressingMode.CONSTANT_8: 2,
    AddressingMode.IMMEDIATE_8: 2,
    AddressingMode.DIRECT: 2,
    AddressingMode.DIRECT_X: 2,
    AddressingMode.DIRECT_Y: 2,
    AddressingMode.STACK_RELATIVE: 2,
    AddressingMode.DIRECT_INDIRECT: 2,
    AddressingMode.DIRECT_X_INDIRECT: 2,
    AddressingMode.DIRECT_INDIRECT_Y: 2,
    AddressingMode.STACK_RELATIVE_INDIRECT_Y: 2,
    AddressingMode.DIRECT_LONG_INDIRECT: 2,
    AddressingMode.DIRECT_LONG_INDIRECT_Y: 2,
    AddressingMode.RELATIVE_8: 2,
    AddressingMode.IMMEDIATE_16: 3,
    AddressingMode.ABSOLUTE: 3,
    AddressingMode.ABSOLUTE_X: 3,
    AddressingMode.ABSOLUTE_Y: 3,
    AddressingMode.ABSOLUTE_INDIRECT: 3,
    AddressingMode.ABSOLUTE_X_INDIRECT: 3,
    AddressingMode.ABSOLUTE_LONG_INDIRECT: 3,
    AddressingMode.BLOCK_MOVE: 3,
    AddressingMode.RELATIVE_16: 3,
    AddressingMode.LONG: 4,
    AddressingMode.LONG_X: 4,
}

# Natural operand width used for size hints and hex literal padding.
_BYTES_TO_SHOW: Mapping[AddressingMode, int] = {
    AddressingMode.CONSTANT_8: 1,
    AddressingMode.IMMEDIATE_8: 1,
    AddressingMode.DIRECT: 1,
    AddressingMode.DIRECT_X: 1,
    AddressingMode.DIRECT_Y: 1,
    AddressingMode.STACK_RELATIVE: 1,
    AddressingMode.DIRECT_INDIRECT: 1,
    AddressingMode.DIRECT_X_INDIRECT: 1,
    AddressingMode.DIRECT_INDIRECT_Y: 1,
    AddressingMode.STACK_RELATIVE_INDIRECT_Y: 1,
    AddressingMode.DIRECT_LONG_INDIRECT: 1,
    AddressingMode.DIRECT_LONG_INDIRECT_Y: 1,
    AddressingMode.RELATIVE_8: 1,
    AddressingMode.IMMEDIATE_16: 2,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.ABSOLUTE_INDIRECT: 2,
    AddressingMode.ABSOLUTE_X_INDIRECT: 2,
    AddressingMode.ABSOLUTE_LONG_INDIRECT: 2,
    AddressingMode.RELATIVE_16: 2,
    AddressingMode.LONG: 3,
    AddressingMode.LONG_X: 3,
}

# {0} mnemonic, {1} operand (address, label or first block-move bank),
# {2} second block-move bank.
_FORMAT_TEMPLATES: Mapping[AddressingMode, str] = {
    AddressingMode.IMPLIED: "{0}",
    AddressingMode.ACCUMULATOR: "{0} A",
    AddressingMode.CONSTANT_8: "{0} #{1}",
    AddressingMode.IMMEDIATE_8: "{0} #{1}",
    AddressingMode.IMMEDIATE_16: "{0} #{1}",
    AddressingMode.DIRECT: "{0} {1}",
    AddressingMode.ABSOLUTE: "{0} {1}",
    AddressingMode.LONG: "{0} {1}",
    AddressingMode.RELATIVE_8: "{0} {1}",
    AddressingMode.RELATIVE_16: "{0} {1}",
    AddressingMode.DIRECT_X: "{0} {1},X",
    AddressingMode.ABSOLUTE_X: "{0} {1},X",
    AddressingMode.LONG_X: "{0} {1},X",
    AddressingMode.DIRECT_Y: "{0} {1},Y",
    AddressingMode.ABSOLUTE_Y: "{0} {1},Y",
    AddressingMode.STACK_RELATIVE: "{0} {1},S",
    AddressingMode.DIRECT_INDIRECT: "{0} ({1})",
    AddressingMode.ABSOLUTE_INDIRECT: "{0} ({1})",
    AddressingMode.DIRECT_X_INDIRECT: "{0} ({1},X)",
    AddressingMode.ABSOLUTE_X_INDIRECT: "{0} ({1},X)",
    AddressingMode.DIRECT_INDIRECT_Y: "{0} ({1}),Y",
    AddressingMode.STACK_RELATIVE_INDIRECT_Y: "{0} ({1},S),Y",
    AddressingMode.DIRECT_LONG_INDIRECT: "{0} [{1}]",
    AddressingMode.ABSOLUTE_LONG_INDIRECT: "{0} [{1}]",
    AddressingMode.DIRECT_LONG_INDIRECT_Y: "{0} [{1}],Y",
    AddressingMode.BLOCK_MOVE: "{0} {1},{2}",
}

DIRECT_PAGE_MODES: FrozenSet[AddressingMode] = frozenset(
    {
        AddressingMode.DIRECT,
        AddressingMode.DIRECT_X,
        AddressingMode.DIRECT_Y,
        AddressingMode.DIRECT_INDIRECT,
        AddressingMode.DIRECT_X_INDIRECT,
        AddressingMode.DIRECT_INDIRECT_Y,
        AddressingMode.DIRECT_LONG_INDIRECT,
        AddressingMode.DIRECT_LONG_INDIRECT_Y,
    }
)
STACK_RELATIVE_MODES: FrozenSet[AddressingMode] = frozenset(
    {AddressingMode.STACK_RELATIVE, AddressingMode.STACK_RELATIVE_INDIRECT_Y}
)
ABSOLUTE_MODES: FrozenSet[AddressingMode] = frozenset(
    {
        AddressingMode.ABSOLUTE,
        AddressingMode.ABSOLUTE_X,
        AddressingMode.ABSOLUTE_Y,
        AddressingMode.ABSOLUTE_X_INDIRECT,
    }
)
POINTER_MODES: FrozenSet[AddressingMode] = frozenset(
    {AddressingMode.ABSOLUTE_INDIRECT, AddressingMode.ABSOLUTE_LONG_INDIRECT}
)
LONG_MODES: FrozenSet[AddressingMode] = frozenset({AddressingMode.LONG, AddressingMode.LONG_X})
RELATIVE_MODES: FrozenSet[AddressingMode] = frozenset(
    {AddressingMode.RELATIVE_8, AddressingMode.RELATIVE_16}
)


def resolve_mode(mode: AddressingMode, x_flag: bool, m_flag: bool) -> AddressingMode:
    """Collapse the flag-dependent immediate tags using the recorded widths.

    ``x_flag``/``m_flag`` are ``True`` when the index registers or the
    accumulator are 8 bits wide.
    """

    if mode is AddressingMode.IMMEDIATE_M:
        return AddressingMode.IMMEDIATE_8 if m_flag else AddressingMode.IMMEDIATE_16
    if mode is AddressingMode.IMMEDIATE_X:
        return AddressingMode.IMMEDIATE_8 if x_flag else AddressingMode.IMMEDIATE_16
    return mode


def instruction_length(mode: AddressingMode) -> int:
    return _INSTRUCTION_LENGTHS.get(mode, 1)


def bytes_to_show(mode: AddressingMode) -> int:
    return _BYTES_TO_SHOW.get(mode, 0)


def format_template(mode: AddressingMode) -> str:
    return _FORMAT_TEMPLATES.get(mode, "")
