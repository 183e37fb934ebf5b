"""Command-line entry point for the 65816 static disassembler.

Loads a SNES ROM, walks the code reachable from the interrupt vectors (or from
an explicit offset) and prints a listing of the decoded instructions.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydiz.data import RomMapMode
from pydiz.loader import RomFormatError, load_rom_from_path
from pydiz.system import ProjectConfig, create_project_from_image


def _parse_int(text: str) -> int:
    value = text.strip().lower()
    if value.startswith("$"):
        return int(value[1:], 16)
    return int(value, 0)


def _parse_map_mode(text: str) -> RomMapMode:
    try:
        return RomMapMode.from_name(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="Static 65816 (SNES) disassembler",
    )
    parser.add_argument("rom", type=Path, help="Path to the SNES ROM image")
    parser.add_argument(
        "--map-mode",
        type=_parse_map_mode,
        help="Override the detected map mode (LoROM, HiROM, ExHiROM, ExLoROM, SuperFX, SA-1, ...)",
    )
    parser.add_argument(
        "--offset",
        type=_parse_int,
        help="Start analysis at this file offset instead of the interrupt vectors",
    )
    parser.add_argument(
        "--harsh",
        type=_parse_int,
        metavar="COUNT",
        help="Decode COUNT bytes linearly from --offset, ignoring control flow",
    )
    parser.add_argument(
        "--lines",
        type=int,
        default=0,
        help="Maximum number of listing lines to print (default: all)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.harsh is not None and args.offset is None:
        parser.error("--harsh requires --offset")

    try:
        image = load_rom_from_path(args.rom, map_mode=args.map_mode)
    except RomFormatError as exc:
        parser.exit(1, f"run.py: {exc}\n")

    project = create_project_from_image(image, ProjectConfig(map_mode=args.map_mode))
    if args.offset is not None:
        if not project.data.contains(args.offset):
            parser.error(f"offset {args.offset:#x} outside ROM of {project.data.size:#x} bytes")
        if args.harsh is not None:
            project.analyze_from(args.offset, harsh=True, amount=args.harsh)
        else:
            project.analyze_from(args.offset)
    else:
        project.analyze_from_vectors()

    print(f"; {project.title or '(untitled)'} [{project.data.map_mode.value}]")
    for count, offset in enumerate(project.iter_opcode_offsets()):
        if args.lines and count >= args.lines:
            break
        print(project.listing_line(offset))
    if project.recorder is not None:
        project.recorder.dump("trace", 32)
    return 0


if __name__ == "__main__":
    sys.exit(main())
