"""Reconciliation of routine parameters.

Merges the parameters reported by the catalog with `-- param:` specs and
with the parameter descriptions of the DocBlock.
"""
from __future__ import annotations

import logging
from typing import Any

from ..directives.docblock import DocBlock
from ..exceptions import UnknownExtendedParameterError
from ..metadata.data_types import parameter_type_hint
from ..metadata.models import (
    ExtendedParameterSpec,
    ParameterMetadata,
    WrapperDocBlock,
    WrapperParameterDoc,
)

logger = logging.getLogger(__name__)


def _data_type_descriptor(row: dict[str, Any]) -> str:
    descriptor = row.get("dtd_identifier") or row.get("data_type") or ""
    if row.get("character_set_name"):
        descriptor += f" character set {row['character_set_name']}"
    if row.get("collation_name"):
        descriptor += f" collation {row['collation_name']}"
    return descriptor


def parameters_from_catalog(rows: list[dict[str, Any]]) -> list[ParameterMetadata]:
    """Build parameter metadata from information_schema.PARAMETERS rows.

    The row without a name (the return value of a function) is skipped.
    """
    parameters = []
    for row in rows:
        if not row.get("parameter_name"):
            continue

        parameters.append(ParameterMetadata(
            parameter_name=row["parameter_name"],
            data_type=row["data_type"],
            dtd_identifier=row.get("dtd_identifier"),
            character_set_name=row.get("character_set_name"),
            collation_name=row.get("collation_name"),
            numeric_precision=row.get("numeric_precision"),
            numeric_scale=row.get("numeric_scale"),
            data_type_descriptor=_data_type_descriptor(row),
        ))

    return parameters


def merge_extended_parameters(
    parameters: list[ParameterMetadata],
    specs: dict[str, ExtendedParameterSpec]
) -> list[ParameterMetadata]:
    """Attach extended specs to the parameters they name.

    Raises:
        UnknownExtendedParameterError: A spec names an unknown parameter
    """
    known = {parameter.parameter_name for parameter in parameters}
    for name in specs:
        if name not in known:
            raise UnknownExtendedParameterError(f"Specific parameter '{name}' does not exist")

    return [
        parameter.model_copy(update={"extended": specs[parameter.parameter_name]})
        if parameter.parameter_name in specs else parameter
        for parameter in parameters
    ]


def build_wrapper_doc_block(docblock: DocBlock, parameters: list[ParameterMetadata]) -> WrapperDocBlock:
    """Compose the DocBlock parts used by the wrapper generator."""
    return WrapperDocBlock(
        short_description=docblock.short_description,
        long_description=docblock.long_description,
        parameters=[
            WrapperParameterDoc(
                parameter_name=parameter.parameter_name,
                python_type=parameter_type_hint(
                    parameter.data_type,
                    parameter.extended.data_type if parameter.extended else None
                ),
                data_type_descriptor=parameter.data_type_descriptor,
                description=docblock.parameter_description(parameter.parameter_name),
            )
            for parameter in parameters
        ]
    )


def validate_parameter_lists(
    routine_name: str,
    parameters: list[ParameterMetadata],
    docblock: DocBlock
) -> list[str]:
    """Report parameters missing from, or unknown to, the DocBlock.

    Mismatches are advisory only.

    Returns:
        Warning messages (also logged)
    """
    database_names = [parameter.parameter_name for parameter in parameters]
    doc_names = docblock.parameter_names

    warnings = []
    for name in database_names:
        if name not in doc_names:
            warnings.append(f"Parameter {name} is missing from doc block")
    for name in doc_names:
        if name not in database_names:
            warnings.append(f"Unknown parameter {name} found in doc block")

    for message in warnings:
        logger.warning(f"{routine_name}: {message}")

    return warnings
