"""Return type directive for routines that return a single value."""
from __future__ import annotations

import logging
import re

from ..exceptions import ReturnTypeValidationError
from ..source.scanner import SourceFile
from .designation import Designation, DesignationKind

logger = logging.getLogger(__name__)

RETURN_DIRECTIVE = re.compile(r"^\s*--\s+return:\s*([\w|]+)\s*$")

DEFAULT_RETURN_TYPE = "mixed"
SCALAR_TYPES = frozenset({"int", "float", "string", "null"})


def resolve_return_type(source: SourceFile, designation: Designation) -> str | None:
    """Find the declared return type of a routine.

    Only routines designated function, singleton0 or singleton1 have a
    return type. When the directive is missing the return type is `mixed`.

    Args:
        source: Scanned routine source
        designation: The routine's designation

    Returns:
        Return type union (e.g. "int|null"), or None for other designations
    """
    if not designation.returns_value:
        return None

    # Nearest directive above the body marker wins.
    for line in reversed(source.directive_lines):
        match = RETURN_DIRECTIVE.match(line)
        if match:
            return match.group(1)

    logger.warning(f"Unable to find the return type of stored routine {source.routine_name}")
    return DEFAULT_RETURN_TYPE


def validate_return_type(return_type: str | None, designation: Designation) -> None:
    """Validate a return type against the designation.

    Raises:
        ReturnTypeValidationError: If the union is not allowed
    """
    if not designation.returns_value:
        return

    return_type = return_type or DEFAULT_RETURN_TYPE
    types = return_type.split("|")

    if not (return_type in ("mixed", "bool") or set(types) <= SCALAR_TYPES):
        raise ReturnTypeValidationError(
            "Return type must be 'mixed', 'bool', or a combination of 'int', 'float', 'string', and 'null'"
        )

    if designation.kind is not DesignationKind.SINGLETON0:
        return

    # A singleton0 may select no row, so its result must be able to be null.
    if return_type in ("mixed", "bool"):
        return

    if "null" not in types:
        raise ReturnTypeValidationError(
            "Return type must be 'mixed', 'bool', or contain 'null' "
            "(with a combination of 'int', 'float', and 'string')"
        )
