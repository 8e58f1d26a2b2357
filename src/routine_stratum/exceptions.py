"""Errors raised while compiling a stored routine source file.

Every error aborts the compile of one routine only. The routine name is
attached by the compiler once it is known.
"""
from __future__ import annotations


class RoutineLoaderError(Exception):
    """Base class for all fatal routine compile errors."""

    def __init__(self, message: str, routine_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.routine_name = routine_name

    def __str__(self) -> str:
        if self.routine_name:
            return f"{self.routine_name}: {self.message}"
        return self.message


class SourceIOError(RoutineLoaderError):
    """The source file cannot be read or stat'ed."""


class UnknownPlaceholderError(RoutineLoaderError):
    """One or more placeholders in the source have no replacement value."""

    def __init__(
        self,
        placeholders: list[str],
        highlighted_source: str = "",
        routine_name: str | None = None
    ) -> None:
        super().__init__(
            f"Unknown placeholder(s) found: {', '.join(placeholders)}",
            routine_name
        )
        self.placeholders = placeholders
        self.highlighted_source = highlighted_source


class MissingDesignationError(RoutineLoaderError):
    """No usable `-- type:` directive above the routine body."""


class MalformedDirectiveError(RoutineLoaderError):
    """A directive comment does not follow its grammar."""


class DuplicateExtendedParameterError(RoutineLoaderError):
    """The same parameter is declared twice with `-- param:`."""


class UnknownExtendedParameterError(RoutineLoaderError):
    """A `-- param:` directive names a parameter the routine does not have."""


class MissingHeaderError(RoutineLoaderError):
    """No `create procedure|function <name>` header in the source."""


class NameMismatchError(RoutineLoaderError):
    """The routine name in the header differs from the file name."""


class ReturnTypeValidationError(RoutineLoaderError):
    """The declared return type is not allowed for the designation."""


class BulkInsertColumnCountMismatch(RoutineLoaderError):
    """Declared bulk insert keys and described table columns differ in count."""

    def __init__(self, expected: int, actual: int, routine_name: str | None = None) -> None:
        super().__init__(
            f"Number of fields {expected} and number of columns {actual} don't match",
            routine_name
        )
        self.expected = expected
        self.actual = actual


class UnsupportedColumnTypeError(RoutineLoaderError):
    """A column of the bulk insert table has a type we cannot describe."""
