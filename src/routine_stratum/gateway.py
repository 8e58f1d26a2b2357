"""Contract between the routine compiler and the routine database.

The compiler never talks to a database driver directly. Callers pass an
object implementing DatabaseGateway, bound to one connection. Routine
loading changes session state, so compiles sharing a gateway run one after
the other.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class CatalogRoutineInfo:
    """A routine as last observed in the database catalog."""
    routine_type: str  # "procedure" or "function"
    sql_mode: str
    character_set_client: str
    collation_connection: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> CatalogRoutineInfo:
        """Build from an information_schema.ROUTINES style row."""
        return cls(
            routine_type=str(row["routine_type"]).lower(),
            sql_mode=row["sql_mode"],
            character_set_client=row["character_set_client"],
            collation_connection=row["collation_connection"],
        )


@runtime_checkable
class DatabaseGateway(Protocol):
    """Database operations needed to load a stored routine."""

    async def execute(self, sql: str) -> None:
        """Execute a statement that selects no rows."""

    async def query_rows(self, sql: str) -> list[dict[str, Any]]:
        """Execute a query and return its rows."""

    async def describe_table(self, name: str) -> list[dict[str, Any]]:
        """Return `describe <name>` rows (keys include Field and Type)."""

    async def table_exists(self, name: str) -> bool:
        """Return True if name is a permanent table of the current schema."""

    async def routine_info(self, name: str) -> CatalogRoutineInfo | None:
        """Return catalog info of a routine, None if it does not exist."""

    async def routine_parameters(self, name: str) -> list[dict[str, Any]]:
        """Return information_schema.PARAMETERS rows of a routine in order."""

    async def set_sql_mode(self, sql_mode: str) -> None:
        """Set the session SQL mode."""

    async def set_charset(self, character_set: str, collation: str) -> None:
        """Set the session character set and collation."""

    async def drop_routine(self, routine_type: str, name: str) -> None:
        """Drop a stored procedure or function."""

    async def drop_temporary_table(self, name: str) -> None:
        """Drop a temporary table."""

    async def call_procedure(self, name: str) -> None:
        """Call a stored procedure without arguments."""

    def escape_string(self, value: str) -> str:
        """Escape a value for use inside a quoted SQL string literal."""
