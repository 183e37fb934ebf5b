"""Baseline tests ensuring the package layout loads correctly."""

import pydiz


def test_package_exports() -> None:
    for name in ("analysis", "cpu", "data", "loader", "system", "utils"):
        assert hasattr(pydiz, name), f"missing submodule: {name}"


def test_cpu_exports() -> None:
    from pydiz import cpu

    for name in ("CPU65C816", "AddressingMode", "Instruction", "OPCODE_TABLE"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"
