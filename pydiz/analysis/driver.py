"""Worklist drivers built on top of :meth:`CPU65C816.step`."""

from __future__ import annotations

from typing import List

from pydiz.cpu import CPU65C816
from pydiz.cpu.opcodes import (
    CALLS,
    CONDITIONAL_BRANCHES,
    MNEMONICS,
    OP_PHP,
    OP_PLP,
    RETURNS,
    STOP_OPCODES,
    UNCONDITIONAL_TRANSFERS,
)
from pydiz.data import CODE_FLAGS, FlagType
from pydiz.utils import StepRecorder, debug_enabled, debug_log

DEFAULT_STEP_LIMIT = 0x10000


def auto_step(
    cpu: CPU65C816,
    offset: int,
    *,
    harsh: bool = False,
    amount: int = 0x200,
    limit: int = DEFAULT_STEP_LIMIT,
    recorder: StepRecorder | None = None,
) -> int:
    """Follow the instruction stream from ``offset`` and return where it stopped.

    In ``harsh`` mode every byte in ``[offset, offset + amount)`` is decoded
    linearly. Otherwise the walker follows jumps, descends into calls and
    returns from them, and stops at anything it cannot follow statically.
    ``limit`` caps the number of decoded instructions.
    """

    if harsh:
        return step_range(cpu, offset, offset + amount, recorder=recorder)

    data = cpu.data
    new_offset = offset
    prev_offset = offset - 1
    call_stack: List[int] = []
    status_stack: List[int] = []
    seen_branches: set[int] = set()

    for _ in range(limit):
        if new_offset in seen_branches:
            _log_stop("branch already visited", new_offset)
            break

        opcode = data.get_rom_byte(new_offset)
        next_offset = cpu.step(new_offset, False, False, prev_offset)
        jump_offset = cpu.step(new_offset, True, False, prev_offset)
        _record(cpu, recorder, new_offset, opcode, next_offset)

        keep_going = opcode not in STOP_OPCODES

        if opcode in UNCONDITIONAL_TRANSFERS or opcode in CONDITIONAL_BRANCHES:
            seen_branches.add(new_offset)

        if opcode == OP_PHP:
            status_stack.append(data.get_mx_flags(new_offset))
        elif opcode == OP_PLP:
            if not status_stack:
                _log_stop("PLP without matching PHP", new_offset)
                break
            data.set_mx_flags(new_offset, status_stack.pop())

        if opcode in RETURNS:
            if not call_stack:
                _log_stop("return with empty call stack", new_offset)
                break
            prev_offset = new_offset
            new_offset = call_stack.pop()
        elif opcode in CALLS:
            call_stack.append(next_offset)
            prev_offset = new_offset
            new_offset = jump_offset
        else:
            prev_offset = new_offset
            new_offset = next_offset

        if not keep_going:
            _log_stop(f"stop opcode {MNEMONICS[opcode]}", prev_offset)
            break
        if not data.contains(new_offset):
            _log_stop("left the ROM image", prev_offset)
            break
        if data.get_flag(new_offset) not in CODE_FLAGS:
            _log_stop("reached data", new_offset)
            break

    return new_offset


def step_range(cpu: CPU65C816, start: int, end: int, *, recorder: StepRecorder | None = None) -> int:
    """Decode ``[start, end)`` linearly, ignoring every control transfer."""

    data = cpu.data
    end = min(end, data.size)
    new_offset = start
    prev_offset = start - 1
    while new_offset < end:
        next_offset = cpu.step(new_offset, False, True, prev_offset)
        _record(cpu, recorder, new_offset, data.get_rom_byte(new_offset), next_offset)
        prev_offset = new_offset
        new_offset = next_offset
    return new_offset


def rescan_in_out_points(cpu: CPU65C816) -> int:
    """Rebuild every in/out marker from the decoded opcodes; return how many were scanned."""

    data = cpu.data
    data.clear_in_out_points()
    count = 0
    for offset in data.offsets_with_flag(FlagType.OPCODE):
        cpu.mark_in_out_points(offset)
        count += 1
    return count


def fix_misaligned_flags(cpu: CPU65C816) -> int:
    """Make every opcode own exactly ``length - 1`` operand bytes.

    Orphaned operand bytes are promoted to opcodes. Returns the number of
    offsets whose flag changed.
    """

    data = cpu.data
    changed = 0
    offset = 0
    while offset < data.size:
        flag = data.get_flag(offset)
        if flag is FlagType.OPCODE:
            length = cpu.get_instruction_length(offset)
            context = data.get_context(offset)
            for index in range(offset + 1, min(offset + length, data.size)):
                if data.get_flag(index) is not FlagType.OPERAND:
                    data.set_flag(index, FlagType.OPERAND)
                    changed += 1
                data.set_context(index, context)
            offset += length
            continue
        if flag is FlagType.OPERAND:
            data.set_flag(offset, FlagType.OPCODE)
            changed += 1
            continue
        offset += 1
    if debug_enabled("auto"):
        debug_log("auto", "fixed %d misaligned offsets", changed)
    return changed


def _record(cpu: CPU65C816, recorder: StepRecorder | None, offset: int, opcode: int, next_offset: int) -> None:
    if recorder is None:
        return
    data = cpu.data
    recorder.record_step(
        offset,
        data.convert_pc_to_snes(offset),
        opcode,
        data.get_context(offset),
        next_offset,
        mnemonic=MNEMONICS[opcode],
    )


def _log_stop(reason: str, offset: int) -> None:
    if debug_enabled("auto"):
        debug_log("auto", "stopped at %06x: %s", offset, reason)
