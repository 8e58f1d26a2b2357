"""Stored routine loader and metadata compiler.

Loads annotated stored routine sources into a database and compiles the
metadata used to generate typed wrappers.
"""
from __future__ import annotations

from .compiler import CompileResult, RoutineCompiler, must_reload
from .gateway import CatalogRoutineInfo, DatabaseGateway
from .loader import LoadResult, load_routines
from .metadata import RoutineMetadata

__all__ = [
    "CompileResult",
    "RoutineCompiler",
    "must_reload",
    "CatalogRoutineInfo",
    "DatabaseGateway",
    "LoadResult",
    "load_routines",
    "RoutineMetadata",
]
