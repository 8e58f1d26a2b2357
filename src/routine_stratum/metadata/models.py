"""Pydantic models for compiled routine metadata.

RoutineMetadata is the unit persisted between builds and consumed by the
wrapper generator.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class ExtendedParameterSpec(BaseModel):
    """How a scalar argument is split into a list before the call."""
    name: str = Field(..., description="Parameter name")
    data_type: str = Field(..., description="Type of the list elements")
    delimiter: str = Field(",", min_length=1, max_length=1)
    enclosure: str = Field('"', min_length=1, max_length=1)
    escape: str = Field("\\", min_length=1, max_length=1)


class ParameterMetadata(BaseModel):
    """A routine parameter as reported by the database catalog."""
    parameter_name: str
    data_type: str
    dtd_identifier: str | None = None
    character_set_name: str | None = None
    collation_name: str | None = None
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    data_type_descriptor: str = ""
    extended: ExtendedParameterSpec | None = None


class BulkInsertColumn(BaseModel):
    """A column of the target table of a bulk insert routine."""
    column_name: str
    data_type: str
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    dtd_identifier: str


class WrapperParameterDoc(BaseModel):
    """Documentation of one parameter for the generated wrapper."""
    parameter_name: str
    python_type: str
    data_type_descriptor: str
    description: str | None = None


class WrapperDocBlock(BaseModel):
    """Documentation parts for the generated wrapper."""
    short_description: str = ""
    long_description: str = ""
    parameters: list[WrapperParameterDoc] = Field(default_factory=list)


class RoutineMetadata(BaseModel):
    """Compiled metadata of a stored routine."""
    routine_name: str
    designation: str
    return_type: str | None = None
    parameters: list[ParameterMetadata] = Field(default_factory=list)
    timestamp: int
    replace: dict[str, str] = Field(
        default_factory=dict,
        description="Placeholders used by the source and their values"
    )
    doc_block: WrapperDocBlock = Field(default_factory=WrapperDocBlock)
    extended_parameters: dict[str, ExtendedParameterSpec] = Field(default_factory=dict)
    index_columns: list[str] | None = None
    bulk_insert_table_name: str | None = None
    bulk_insert_columns: list[BulkInsertColumn] | None = None
    bulk_insert_keys: list[str] | None = None
