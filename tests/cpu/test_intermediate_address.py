"""Tests for operand address resolution."""

from __future__ import annotations

import pytest

from pydiz.cpu import CPU65C816
from pydiz.data import ProcessorContext, RomData


def make_cpu(program: bytes, offset: int = 0, context: ProcessorContext | None = None) -> CPU65C816:
    rom = bytearray(0x10000)
    rom[offset : offset + len(program)] = program
    data = RomData(bytes(rom))
    if context is not None:
        data.set_context(offset, context)
    return CPU65C816(data)


def test_jump_uses_program_bank() -> None:
    cpu = make_cpu(bytes([0x4C, 0x00, 0x90]), context=ProcessorContext(data_bank=0x7E))

    assert cpu.get_intermediate_address(0) == 0x009000


def test_jump_in_second_bank() -> None:
    cpu = make_cpu(bytes([0x4C, 0x00, 0x90]), offset=0x8000)

    assert cpu.get_intermediate_address(0x8000) == 0x019000


def test_absolute_load_uses_data_bank() -> None:
    cpu = make_cpu(bytes([0xAD, 0x00, 0x90]), context=ProcessorContext(data_bank=0x7E))

    assert cpu.get_intermediate_address(0) == 0x7E9000


def test_direct_page_resolution() -> None:
    cpu = make_cpu(bytes([0xA5, 0x10]), context=ProcessorContext(direct_page=0x1200))

    assert cpu.get_intermediate_address(0) == 0x1210
    assert cpu.get_intermediate_address(0, resolve=True) == 0x1210
    assert cpu.get_intermediate_address(0, resolve=False) == 0x10


def test_direct_page_wraps_within_bank_zero() -> None:
    cpu = make_cpu(bytes([0xB7, 0x20]), context=ProcessorContext(direct_page=0xFFF0))

    assert cpu.get_intermediate_address(0, resolve=True) == 0x0010


def test_stack_relative_ignores_direct_page() -> None:
    cpu = make_cpu(bytes([0xB3, 0x05]), context=ProcessorContext(direct_page=0x1200))

    assert cpu.get_intermediate_address(0, resolve=True) == 0x05


@pytest.mark.parametrize("opcode", [0x6C, 0xDC])
def test_indirect_pointer_is_bank_less(opcode: int) -> None:
    cpu = make_cpu(bytes([opcode, 0x34, 0x12]), context=ProcessorContext(data_bank=0x7E))

    assert cpu.get_intermediate_address(0) == 0x1234


def test_long_operand() -> None:
    cpu = make_cpu(bytes([0x22, 0x56, 0x34, 0x12]))

    assert cpu.get_intermediate_address(0) == 0x123456


def test_relative_branch_to_itself() -> None:
    cpu = make_cpu(bytes([0xF0, 0xFE]), offset=0x0E)

    assert cpu.get_intermediate_address(0x0E) == 0x00800E


def test_relative_branch_forward() -> None:
    cpu = make_cpu(bytes([0x80, 0x05]))

    assert cpu.get_intermediate_address(0) == 0x008007


def test_long_relative_branch_backward() -> None:
    cpu = make_cpu(bytes([0x82, 0xFD, 0xFF]))

    assert cpu.get_intermediate_address(0) == 0x008000


@pytest.mark.parametrize(
    "program",
    [bytes([0xEA]), bytes([0x0A]), bytes([0xA9, 0x12]), bytes([0xC2, 0x30]), bytes([0x54, 0x7E, 0x7F])],
)
def test_shapes_without_address_return_minus_one(program: bytes) -> None:
    cpu = make_cpu(program, context=ProcessorContext(x_flag=True, m_flag=True))

    assert cpu.get_intermediate_address(0, resolve=True) == -1
