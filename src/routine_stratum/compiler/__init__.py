"""Routine compiler: reload decisions, loading and reconciliation."""
from __future__ import annotations

from .compiler import CompileResult, RoutineBuild, RoutineCompiler
from .reload import must_reload, reload_reason

__all__ = [
    "CompileResult",
    "RoutineBuild",
    "RoutineCompiler",
    "must_reload",
    "reload_reason",
]
