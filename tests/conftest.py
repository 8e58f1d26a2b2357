"""Shared pytest fixtures for all tests."""
import re
import pytest
import os
from pathlib import Path

from routine_stratum.compiler import RoutineCompiler
from routine_stratum.gateway import CatalogRoutineInfo

SQL_MODE = "STRICT_ALL_TABLES,ONLY_FULL_GROUP_BY"
CHARACTER_SET = "utf8mb4"
COLLATION = "utf8mb4_general_ci"

CREATE_ROUTINE = re.compile(r"create\s+(procedure|function)\s+([a-zA-Z0-9_]+)", re.IGNORECASE)


class FakeGateway:
    """In-memory database gateway recording every call."""

    def __init__(self):
        self.calls = []
        self.routines = {}
        self.parameters = {}
        self.tables = {}
        self.temporary_tables = {}
        # routine name -> (table name, describe rows) created when called
        self.procedure_tables = {}
        self.fail_on_execute = None
        self.session = {"sql_mode": None, "character_set": None, "collation": None}

    async def execute(self, sql):
        self.calls.append(("execute", sql))
        if self.fail_on_execute is not None:
            raise self.fail_on_execute
        match = CREATE_ROUTINE.search(sql)
        if match:
            self.routines[match.group(2)] = CatalogRoutineInfo(
                routine_type=match.group(1).lower(),
                sql_mode=self.session["sql_mode"],
                character_set_client=self.session["character_set"],
                collation_connection=self.session["collation"],
            )

    async def query_rows(self, sql):
        self.calls.append(("query_rows", sql))
        return []

    async def describe_table(self, name):
        self.calls.append(("describe_table", name))
        if name in self.temporary_tables:
            return self.temporary_tables[name]
        if name in self.tables:
            return self.tables[name]
        raise LookupError(f"Table '{name}' doesn't exist")

    async def table_exists(self, name):
        self.calls.append(("table_exists", name))
        return name in self.tables

    async def routine_info(self, name):
        return self.routines.get(name)

    async def routine_parameters(self, name):
        self.calls.append(("routine_parameters", name))
        return list(self.parameters.get(name, []))

    async def set_sql_mode(self, sql_mode):
        self.calls.append(("set_sql_mode", sql_mode))
        self.session["sql_mode"] = sql_mode

    async def set_charset(self, character_set, collation):
        self.calls.append(("set_charset", character_set, collation))
        self.session["character_set"] = character_set
        self.session["collation"] = collation

    async def drop_routine(self, routine_type, name):
        self.calls.append(("drop_routine", routine_type, name))
        self.routines.pop(name, None)

    async def drop_temporary_table(self, name):
        self.calls.append(("drop_temporary_table", name))
        self.temporary_tables.pop(name, None)

    async def call_procedure(self, name):
        self.calls.append(("call_procedure", name))
        if name in self.procedure_tables:
            table, rows = self.procedure_tables[name]
            self.temporary_tables[table] = rows

    def escape_string(self, value):
        return value.replace("\\", "\\\\").replace("'", "\\'")

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def gateway():
    """Fresh fake gateway for each test."""
    return FakeGateway()


@pytest.fixture
def session_settings():
    """Session settings the compiler loads routines under."""
    return {"sql_mode": SQL_MODE, "character_set": CHARACTER_SET, "collation": COLLATION}


@pytest.fixture
def compiler(gateway, session_settings):
    """Routine compiler bound to the fake gateway."""
    return RoutineCompiler(gateway, **session_settings)


@pytest.fixture
def write_routine(tmp_path):
    """Write a routine source file and return its path."""
    def _write(name, text, suffix=".psql", directory=None):
        target = Path(directory) if directory else tmp_path
        target.mkdir(parents=True, exist_ok=True)
        path = target / f"{name}{suffix}"
        path.write_text(text)
        return path
    return _write


@pytest.fixture(scope="session")
def database_url():
    """PostgreSQL URL for metadata store tests, None when not configured."""
    return os.getenv("TEST_DB_URL")
