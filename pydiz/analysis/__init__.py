"""Analysis drivers: stream walking, linear decoding and flow rescans."""

from .driver import DEFAULT_STEP_LIMIT, auto_step, fix_misaligned_flags, rescan_in_out_points, step_range
from .vectors import EMULATION_VECTORS, NATIVE_VECTORS, VectorEntry, read_vectors, seed_vectors

__all__ = [
    "DEFAULT_STEP_LIMIT",
    "auto_step",
    "fix_misaligned_flags",
    "rescan_in_out_points",
    "step_range",
    "EMULATION_VECTORS",
    "NATIVE_VECTORS",
    "VectorEntry",
    "read_vectors",
    "seed_vectors",
]
