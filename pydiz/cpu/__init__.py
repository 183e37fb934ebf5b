"""65816 CPU analysis package."""

from .core import CPU65C816
from . import opcodes
from .opcodes import AddressingMode, Instruction, OPCODE_TABLE

__all__ = [
    "CPU65C816",
    "AddressingMode",
    "Instruction",
    "OPCODE_TABLE",
    "opcodes",
]
