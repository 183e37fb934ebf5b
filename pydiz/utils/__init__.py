"""Utility helpers for the pydiz analysis engine."""

from .debug import debug_enabled, debug_log, reload_debug_categories
from .trace import StepEntry, StepRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "reload_debug_categories",
    "StepEntry",
    "StepRecorder",
]
