"""Compiled routine metadata and its persistence."""
from __future__ import annotations

from .data_types import data_type_to_python_type, parameter_type_hint
from .models import (
    BulkInsertColumn,
    ExtendedParameterSpec,
    ParameterMetadata,
    RoutineMetadata,
    WrapperDocBlock,
    WrapperParameterDoc,
)
from .store import JsonMetadataStore, MetadataStore, PostgresMetadataStore

__all__ = [
    "data_type_to_python_type",
    "parameter_type_hint",
    "BulkInsertColumn",
    "ExtendedParameterSpec",
    "ParameterMetadata",
    "RoutineMetadata",
    "WrapperDocBlock",
    "WrapperParameterDoc",
    "JsonMetadataStore",
    "MetadataStore",
    "PostgresMetadataStore",
]
