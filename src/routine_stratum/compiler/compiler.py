"""Compiles a stored routine source file into routine metadata.

The compiler decides whether a routine must be loaded, loads it through the
database gateway and reconciles the declared directives with what the
database reports. Each pipeline stage takes a frozen build value and returns
an updated copy, so a failing stage never leaves partial metadata behind.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import AsyncIterator

from ..directives.designation import Designation, DesignationKind, resolve_designation
from ..directives.docblock import DocBlock, parse_docblock
from ..directives.params import parse_extended_parameters
from ..directives.placeholders import (
    ReplacePairs,
    expand_placeholders,
    replacement_pattern,
    substitute,
)
from ..directives.return_type import resolve_return_type, validate_return_type
from ..exceptions import (
    BulkInsertColumnCountMismatch,
    MissingHeaderError,
    NameMismatchError,
    RoutineLoaderError,
)
from ..gateway import CatalogRoutineInfo, DatabaseGateway
from ..metadata.models import (
    BulkInsertColumn,
    ExtendedParameterSpec,
    ParameterMetadata,
    RoutineMetadata,
    WrapperDocBlock,
)
from ..source.scanner import SourceFile, scan_source, source_timestamp
from .columns import columns_from_description
from .reconcile import (
    build_wrapper_doc_block,
    merge_extended_parameters,
    parameters_from_catalog,
    validate_parameter_lists,
)
from .reload import reload_reason

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(r"create\s+(procedure|function)\s+([a-zA-Z0-9_]+)", re.IGNORECASE)

MAGIC_FILE = "__FILE__"
MAGIC_DIR = "__DIR__"
MAGIC_ROUTINE = "__ROUTINE__"
MAGIC_LINE = "__LINE__"
MAGIC_CONSTANTS = (MAGIC_FILE, MAGIC_DIR, MAGIC_ROUTINE, MAGIC_LINE)


@dataclass(frozen=True)
class CompileResult:
    """Outcome of compiling one routine source."""
    metadata: RoutineMetadata
    reloaded: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class RoutineBuild:
    """Intermediate state of a routine compile."""
    source: SourceFile
    replace: Mapping[str, str] = field(default_factory=dict)
    designation: Designation | None = None
    return_type: str | None = None
    routine_type: str | None = None
    header_offset: int = 0
    routine_source: str | None = None
    bulk_insert_columns: tuple[BulkInsertColumn, ...] | None = None
    parameters: tuple[ParameterMetadata, ...] = ()
    extended_parameters: Mapping[str, ExtendedParameterSpec] = field(default_factory=dict)
    doc_block: WrapperDocBlock | None = None
    warnings: tuple[str, ...] = ()

    @property
    def routine_name(self) -> str:
        return self.source.routine_name


class RoutineCompiler:
    """Loads stored routines and compiles their metadata.

    Args:
        gateway: Database gateway bound to one connection
        sql_mode: SQL mode under which routines are loaded and run
        character_set: Default character set of routines
        collation: Default collation of routines
        doc_parser: Parser for the DocBlock above the routine header
    """

    def __init__(
        self,
        gateway: DatabaseGateway,
        sql_mode: str,
        character_set: str,
        collation: str,
        doc_parser: Callable[[str], DocBlock] = parse_docblock
    ) -> None:
        self.gateway = gateway
        self.sql_mode = sql_mode
        self.character_set = character_set
        self.collation = collation
        self.doc_parser = doc_parser

    async def compile(
        self,
        path: str | Path,
        previous: RoutineMetadata | None = None,
        replace_pairs: Mapping[str, str] | None = None,
        catalog_info: CatalogRoutineInfo | None = None
    ) -> CompileResult:
        """Load a routine if needed and return its metadata.

        Args:
            path: Source file of the routine
            previous: Metadata of the previous build, if any
            replace_pairs: Placeholder values
            catalog_info: The routine as currently found in the database

        Returns:
            CompileResult; when no reload is needed its metadata is `previous`

        Raises:
            RoutineLoaderError: On any compile failure (routine_name is set)
        """
        path = Path(path)
        routine_name = path.stem
        if not isinstance(replace_pairs, ReplacePairs):
            replace_pairs = ReplacePairs(replace_pairs)

        try:
            timestamp = source_timestamp(path)
            reason = reload_reason(
                previous,
                timestamp,
                replace_pairs,
                catalog_info,
                self.sql_mode,
                self.character_set,
                self.collation
            )
            if reason is None:
                logger.info(f"Routine {routine_name} is up to date")
                return CompileResult(metadata=previous, reloaded=False)

            logger.info(f"Loading routine {routine_name} ({reason})")

            build = RoutineBuild(source=scan_source(path))
            build = self._expand_placeholders(build, replace_pairs)
            build = self._resolve_designation(build)
            build = self._resolve_return_type(build)
            build = self._check_header(build)
            validate_return_type(build.return_type, build.designation)
            build = self._substitute(build)
            await self._load(build, catalog_info)
            build = await self._bulk_insert_columns(build)
            build = await self._parameters(build)
            build = self._doc_block(build)

            return CompileResult(metadata=self._emit(build), reloaded=True, warnings=build.warnings)

        except RoutineLoaderError as e:
            e.routine_name = routine_name
            raise

    def _expand_placeholders(self, build: RoutineBuild, replace_pairs: ReplacePairs) -> RoutineBuild:
        return replace(build, replace=expand_placeholders(build.source.text, replace_pairs))

    def _resolve_designation(self, build: RoutineBuild) -> RoutineBuild:
        return replace(build, designation=resolve_designation(build.source))

    def _resolve_return_type(self, build: RoutineBuild) -> RoutineBuild:
        return replace(build, return_type=resolve_return_type(build.source, build.designation))

    def _check_header(self, build: RoutineBuild) -> RoutineBuild:
        """Extract routine type and name from the `create` header."""
        match = HEADER_PATTERN.search(build.source.text)
        if not match:
            raise MissingHeaderError("Unable to find the stored routine name and type")

        if match.group(2) != build.routine_name:
            raise NameMismatchError(
                f"Stored routine name '{match.group(2)}' does not correspond with filename"
            )

        return replace(build, routine_type=match.group(1).lower(), header_offset=match.start())

    def _magic_constants(self, build: RoutineBuild) -> dict[str, str]:
        real_path = build.source.path.resolve()
        return {
            MAGIC_FILE: f"'{self.gateway.escape_string(str(real_path))}'",
            MAGIC_DIR: f"'{self.gateway.escape_string(str(real_path.parent))}'",
            MAGIC_ROUTINE: f"'{build.routine_name}'",
        }

    def _substitute(self, build: RoutineBuild) -> RoutineBuild:
        """Replace placeholders and magic constants line by line.

        Magic constants only live in the substitution map of this step, the
        persisted replace map holds the source placeholders only.
        """
        active = {**build.replace, **self._magic_constants(build), MAGIC_LINE: ""}
        pattern = replacement_pattern(active)

        lines = []
        for number, line in enumerate(build.source.lines, start=1):
            active[MAGIC_LINE] = str(number)
            lines.append(substitute(line, active, pattern))

        return replace(build, routine_source="\n".join(lines))

    async def _load(self, build: RoutineBuild, catalog_info: CatalogRoutineInfo | None) -> None:
        """Drop the old routine and create the new one."""
        if catalog_info is not None:
            await self.gateway.drop_routine(catalog_info.routine_type, build.routine_name)

        await self.gateway.set_sql_mode(self.sql_mode)
        await self.gateway.set_charset(self.character_set, self.collation)
        await self.gateway.execute(build.routine_source)

    @asynccontextmanager
    async def _bulk_insert_table(self, routine_name: str, table_name: str) -> AsyncIterator[None]:
        """Make sure the bulk insert table exists while inside the block.

        A temporary table is created by calling the routine and is dropped
        again on exit.
        """
        temporary = not await self.gateway.table_exists(table_name)
        if temporary:
            await self.gateway.call_procedure(routine_name)
        try:
            yield
        finally:
            if temporary:
                await self.gateway.drop_temporary_table(table_name)

    async def _bulk_insert_columns(self, build: RoutineBuild) -> RoutineBuild:
        designation = build.designation
        if designation.kind is not DesignationKind.BULK_INSERT:
            return build

        async with self._bulk_insert_table(build.routine_name, designation.table_name):
            description = await self.gateway.describe_table(designation.table_name)

        expected = len(designation.columns)
        if expected != len(description):
            raise BulkInsertColumnCountMismatch(expected, len(description))

        return replace(build, bulk_insert_columns=tuple(columns_from_description(description)))

    async def _parameters(self, build: RoutineBuild) -> RoutineBuild:
        """Fetch the routine's parameters and merge the extended specs."""
        rows = await self.gateway.routine_parameters(build.routine_name)
        specs = parse_extended_parameters(build.source)
        parameters = merge_extended_parameters(parameters_from_catalog(rows), specs)

        return replace(build, parameters=tuple(parameters), extended_parameters=specs)

    def _doc_block(self, build: RoutineBuild) -> RoutineBuild:
        docblock = self.doc_parser(build.source.text[:build.header_offset])
        parameters = list(build.parameters)
        warnings = validate_parameter_lists(build.routine_name, parameters, docblock)

        return replace(
            build,
            doc_block=build_wrapper_doc_block(docblock, parameters),
            warnings=build.warnings + tuple(warnings)
        )

    def _emit(self, build: RoutineBuild) -> RoutineMetadata:
        designation = build.designation
        return RoutineMetadata(
            routine_name=build.routine_name,
            designation=designation.kind.value,
            return_type=build.return_type,
            parameters=list(build.parameters),
            timestamp=build.source.timestamp,
            replace=dict(build.replace),
            doc_block=build.doc_block,
            extended_parameters=dict(build.extended_parameters),
            index_columns=designation.index_columns,
            bulk_insert_table_name=designation.table_name,
            bulk_insert_columns=(
                list(build.bulk_insert_columns) if build.bulk_insert_columns is not None else None
            ),
            bulk_insert_keys=designation.bulk_insert_keys,
        )
