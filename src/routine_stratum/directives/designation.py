"""Designation type directive.

The designation type declares the shape of a routine's result and is given
by exactly one `-- type: <kind> [payload]` line above the routine body.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import MalformedDirectiveError, MissingDesignationError
from ..source.scanner import SourceFile

TYPE_DIRECTIVE = re.compile(r"^\s*--\s+type:\s*(\w+)\s*(.+)?\s*$")
BULK_INSERT_PAYLOAD = re.compile(r"^([a-zA-Z0-9_]+)\s+([a-zA-Z0-9_,]+)$")


class DesignationKind(str, Enum):
    NONE = "none"
    PROCEDURE = "procedure"
    FUNCTION = "function"
    TABLE = "table"
    SINGLETON0 = "singleton0"
    SINGLETON1 = "singleton1"
    ROWS_WITH_KEY = "rows_with_key"
    ROWS_WITH_INDEX = "rows_with_index"
    BULK_INSERT = "bulk_insert"


# Designations whose routine returns a single value.
VALUE_DESIGNATIONS = frozenset({
    DesignationKind.FUNCTION,
    DesignationKind.SINGLETON0,
    DesignationKind.SINGLETON1,
})


@dataclass(frozen=True)
class Designation:
    """A parsed designation with its payload."""
    kind: DesignationKind
    columns: tuple[str, ...] = field(default_factory=tuple)
    table_name: str | None = None

    @property
    def index_columns(self) -> list[str] | None:
        if self.kind in (DesignationKind.ROWS_WITH_KEY, DesignationKind.ROWS_WITH_INDEX):
            return list(self.columns)
        return None

    @property
    def bulk_insert_keys(self) -> list[str] | None:
        if self.kind is DesignationKind.BULK_INSERT:
            return list(self.columns)
        return None

    @property
    def returns_value(self) -> bool:
        return self.kind in VALUE_DESIGNATIONS


def parse_designation(kind_word: str, payload: str | None) -> Designation:
    """Parse the kind and payload of a `-- type:` directive."""
    try:
        kind = DesignationKind(kind_word)
    except ValueError:
        raise MalformedDirectiveError(f"Unknown designation type '{kind_word}'") from None

    if kind is DesignationKind.BULK_INSERT:
        match = BULK_INSERT_PAYLOAD.match(payload or "")
        if not match:
            raise MalformedDirectiveError("Expected: -- type: bulk_insert <table_name> <columns>")
        return Designation(
            kind=kind,
            columns=tuple(match.group(2).split(",")),
            table_name=match.group(1)
        )

    if kind in (DesignationKind.ROWS_WITH_KEY, DesignationKind.ROWS_WITH_INDEX):
        if not payload:
            raise MalformedDirectiveError(f"Expected: -- type: {kind.value} <columns>")
        columns = tuple(column.strip() for column in payload.split(","))
        return Designation(kind=kind, columns=columns)

    if payload:
        raise MissingDesignationError(
            f"Unable to find the designation type of the stored routine "
            f"(unexpected payload '{payload}' for '{kind.value}')"
        )

    return Designation(kind=kind)


def resolve_designation(source: SourceFile) -> Designation:
    """Find and parse the designation type of a routine.

    Args:
        source: Scanned routine source

    Returns:
        Designation

    Raises:
        MissingDesignationError: No body marker, no directive, or unexpected payload
        MalformedDirectiveError: Directive present but malformed or repeated
    """
    if source.marker_index is None:
        raise MissingDesignationError("Unable to find the designation type of the stored routine")

    matches = [
        match
        for match in (TYPE_DIRECTIVE.match(line) for line in source.directive_lines)
        if match
    ]

    if not matches:
        raise MissingDesignationError("Unable to find the designation type of the stored routine")
    if len(matches) > 1:
        raise MalformedDirectiveError("Found more than one '-- type:' directive")

    kind_word, payload = matches[0].group(1), matches[0].group(2)
    return parse_designation(kind_word, payload.strip() if payload else None)
