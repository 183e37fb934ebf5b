"""Static 65816 instruction analysis.

``CPU65C816`` never executes code. It decodes one instruction at a time from a
:class:`~pydiz.data.RomData` store, carrying the direct page, data bank and
M/X width flags forward from the previously analysed instruction so that
flag-dependent immediates decode with the right length, and records
control-flow markers for later graph construction.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydiz.data import FlagType, InOutPoint, ProcessorContext, RomData
from pydiz.utils import debug_enabled, debug_log

from .opcodes import (
    ABSOLUTE_MODES,
    ADDRESSING_MODES,
    CALLS,
    CONDITIONAL_BRANCHES,
    DIRECT_PAGE_MODES,
    END_POINT_OPCODES,
    FLOW_OPCODES,
    LONG_MODES,
    MAX_INSTRUCTION_LENGTH,
    MNEMONICS,
    OP_REP,
    OP_SEP,
    POINTER_MODES,
    PROGRAM_BANK_OPCODES,
    READ_POINT_EXCLUDED,
    RELATIVE_MODES,
    STACK_RELATIVE_MODES,
    UNCONDITIONAL_TRANSFERS,
    AddressingMode,
    bytes_to_show,
    format_template,
    instruction_length,
    resolve_mode,
)


def _sign_extend(value: int, bits: int) -> int:
    sign = 1 << (bits - 1)
    return (value & (sign - 1)) - (value & sign)


def _hex(value: int, digits: int) -> str:
    return f"${value:0{digits}X}"


def _is_read_opcode(opcode: int) -> bool:
    """Return True for opcodes that read or modify the memory they address."""

    if opcode in READ_POINT_EXCLUDED:
        return False
    return (
        (opcode & 0x04) != 0
        or (opcode & 0x0F) == 0x01
        or (opcode & 0x0F) == 0x03
        or (opcode & 0x1F) == 0x12
        or (opcode & 0x1F) == 0x19
    )


@dataclass
class CPU65C816:
    """Decoder, context propagator and flow marker for one ROM store."""

    data: RomData

    # ------------------------------------------------------------------
    # Decoding

    def step(self, offset: int, branch: bool = False, force: bool = False, prev_offset: int = -1) -> int:
        """Decode the instruction at ``offset`` and return the next offset to visit.

        ``prev_offset`` is the previously analysed instruction (or any of its
        operand bytes); its context is inherited. With ``prev_offset < 0`` the
        context already stored at ``offset`` is used. ``branch`` makes
        conditional branches and calls follow their target; ``force`` always
        falls through sequentially.
        """

        data = self.data
        opcode = data.get_rom_byte(offset)
        context = self.inherited_context(offset, prev_offset)

        if opcode in (OP_REP, OP_SEP) and data.contains(offset + 1):
            context = context.with_status_mask(data.get_rom_byte(offset + 1), set_bits=opcode == OP_SEP)

        # The opcode byte carries the context first so the length resolves correctly.
        data.set_flag(offset, FlagType.OPCODE)
        data.set_context(offset, context)

        length = self.get_instruction_length(offset)
        for index in range(offset + 1, min(offset + length, data.size)):
            data.set_flag(index, FlagType.OPERAND)
            data.set_context(index, context)

        self.mark_in_out_points(offset)

        next_offset = offset + length
        if self._follows_transfer(opcode, branch, force):
            target = data.convert_snes_to_pc(self.get_intermediate_address(offset, resolve=True))
            if target >= 0:
                next_offset = target

        if debug_enabled("step"):
            debug_log(
                "step",
                "pc=%06x op=%02x %s D=%04x B=%02x m=%d x=%d next=%06x",
                offset,
                opcode,
                MNEMONICS[opcode],
                context.direct_page,
                context.data_bank,
                context.m_flag,
                context.x_flag,
                next_offset,
            )
        return next_offset

    def inherited_context(self, offset: int, prev_offset: int) -> ProcessorContext:
        """Find the context ``offset`` inherits from the instruction at ``prev_offset``."""

        data = self.data
        if prev_offset < 0 or not data.contains(prev_offset):
            return data.get_context(offset)

        owner = prev_offset
        lowest = max(prev_offset - (MAX_INSTRUCTION_LENGTH - 1), 0)
        while owner > lowest and data.get_flag(owner) is FlagType.OPERAND:
            owner -= 1
        if data.get_flag(owner) is FlagType.OPCODE:
            return data.get_context(owner)
        return data.get_context(offset)

    @staticmethod
    def _follows_transfer(opcode: int, branch: bool, force: bool) -> bool:
        if force:
            return False
        if opcode in UNCONDITIONAL_TRANSFERS:
            return True
        return branch and (opcode in CONDITIONAL_BRANCHES or opcode in CALLS)

    def get_address_mode(self, offset: int) -> AddressingMode:
        data = self.data
        mode = ADDRESSING_MODES[data.get_rom_byte(offset)]
        return resolve_mode(mode, data.get_x_flag(offset), data.get_m_flag(offset))

    def get_instruction_length(self, offset: int) -> int:
        return instruction_length(self.get_address_mode(offset))

    @staticmethod
    def instruction_length(mode: AddressingMode) -> int:
        return instruction_length(mode)

    def is_truncated(self, offset: int) -> bool:
        """Return True when the instruction at ``offset`` runs past the ROM end."""

        return offset + self.get_instruction_length(offset) > self.data.size

    # ------------------------------------------------------------------
    # Address resolution

    def get_intermediate_address(self, offset: int, resolve: bool = True) -> int:
        """Return the address the operand at ``offset`` designates, or -1.

        Direct page shapes add the recorded direct page register unless
        ``resolve`` is cleared, in which case (and always for stack-relative
        shapes) the raw operand byte is returned.
        """

        data = self.data
        mode = self.get_address_mode(offset)
        if self.is_truncated(offset):
            return -1

        if mode in DIRECT_PAGE_MODES:
            if resolve:
                return (data.get_direct_page(offset) + data.get_rom_byte(offset + 1)) & 0xFFFF
            return data.get_rom_byte(offset + 1)

        if mode in STACK_RELATIVE_MODES:
            return data.get_rom_byte(offset + 1)

        if mode in ABSOLUTE_MODES:
            opcode = data.get_rom_byte(offset)
            if opcode in PROGRAM_BANK_OPCODES:
                bank = data.convert_pc_to_snes(offset) >> 16
            else:
                bank = data.get_data_bank(offset)
            return (bank << 16) | data.get_rom_word(offset + 1)

        if mode in POINTER_MODES:
            return data.get_rom_word(offset + 1)

        if mode in LONG_MODES:
            return data.get_rom_long(offset + 1)

        if mode is AddressingMode.RELATIVE_8:
            return self._relative_target(offset, 2, _sign_extend(data.get_rom_byte(offset + 1), 8))

        if mode is AddressingMode.RELATIVE_16:
            return self._relative_target(offset, 3, _sign_extend(data.get_rom_word(offset + 1), 16))

        return -1

    def _relative_target(self, offset: int, length: int, displacement: int) -> int:
        program_counter = self.data.convert_pc_to_snes(offset + length)
        if program_counter < 0:
            # Branch at the very end of the image: derive the end address from the opcode.
            start = self.data.convert_pc_to_snes(offset)
            if start < 0:
                return -1
            program_counter = start + length
        bank = program_counter >> 16
        return (bank << 16) | ((program_counter + displacement) & 0xFFFF)

    # ------------------------------------------------------------------
    # Control-flow markers

    def mark_in_out_points(self, offset: int) -> None:
        data = self.data
        opcode = data.get_rom_byte(offset)
        target = data.convert_snes_to_pc(self.get_intermediate_address(offset, resolve=True))

        if target >= 0 and _is_read_opcode(opcode):
            data.set_in_out_point(target, InOutPoint.READ_POINT)

        if opcode in END_POINT_OPCODES:
            data.set_in_out_point(offset, InOutPoint.END_POINT)

        if target >= 0 and opcode in FLOW_OPCODES:
            data.set_in_out_point(offset, InOutPoint.OUT_POINT)
            data.set_in_out_point(target, InOutPoint.IN_POINT)
            if debug_enabled("flow"):
                debug_log("flow", "%s %06x -> %06x", MNEMONICS[opcode], offset, target)

    # ------------------------------------------------------------------
    # Text rendering

    def get_instruction(self, offset: int) -> str:
        """Render the instruction at ``offset`` as ``MNEMONIC[.size] operand``."""

        data = self.data
        mode = self.get_address_mode(offset)
        template = format_template(mode)
        mnemonic = self.get_mnemonic(offset)
        if self.is_truncated(offset):
            return mnemonic

        operand1 = ""
        operand2 = ""
        if mode is AddressingMode.BLOCK_MOVE:
            operand1 = _hex(data.get_rom_byte(offset + 1), 2)
            operand2 = _hex(data.get_rom_byte(offset + 2), 2)
        elif mode in (AddressingMode.CONSTANT_8, AddressingMode.IMMEDIATE_8):
            operand1 = _hex(data.get_rom_byte(offset + 1), 2)
        elif mode is AddressingMode.IMMEDIATE_16:
            operand1 = _hex(data.get_rom_word(offset + 1), 4)
        else:
            operand1 = self._format_operand_address(offset, mode)
        return template.format(mnemonic, operand1, operand2)

    def get_mnemonic(self, offset: int, show_hint: bool = True) -> str:
        mnemonic = MNEMONICS[self.data.get_rom_byte(offset)]
        if not show_hint:
            return mnemonic

        mode = self.get_address_mode(offset)
        if mode is AddressingMode.CONSTANT_8 or mode in RELATIVE_MODES:
            return mnemonic
        suffix = {1: ".B", 2: ".W", 3: ".L"}.get(bytes_to_show(mode), "")
        return mnemonic + suffix

    def _format_operand_address(self, offset: int, mode: AddressingMode) -> str:
        address = self.get_intermediate_address(offset, resolve=True)
        if address < 0:
            return ""
        label = self.data.get_label_name(address)
        if label:
            return label

        count = bytes_to_show(mode)
        if mode in RELATIVE_MODES:
            value = self.data.get_rom_byte(offset + 1)
            if mode is AddressingMode.RELATIVE_16:
                value = self.data.get_rom_word(offset + 1)
        else:
            value = self.get_intermediate_address(offset, resolve=False)
        value &= (1 << (8 * count)) - 1
        return _hex(value, 2 * count)
