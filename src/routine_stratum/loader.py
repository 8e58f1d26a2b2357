"""Batch loading of all routine sources of a directory.

A failing routine does not stop the batch: its previous metadata is kept
and the failure is reported in the result.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .compiler.compiler import RoutineCompiler
from .config.loader import LoaderConfig, MetadataConfig
from .directives.docblock import DocBlock, parse_docblock
from .directives.placeholders import ReplacePairs
from .exceptions import RoutineLoaderError, UnknownPlaceholderError
from .gateway import DatabaseGateway
from .metadata.models import RoutineMetadata
from .metadata.store import JsonMetadataStore, MetadataStore, PostgresMetadataStore

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of a batch load."""
    loaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, RoutineMetadata] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


def create_metadata_store(config: MetadataConfig) -> MetadataStore:
    """Create the metadata store selected by the configuration."""
    if config.backend == "postgres":
        return PostgresMetadataStore(config.dsn, table=config.table)
    return JsonMetadataStore(config.path)


def find_sources(directory: Path, extension: str) -> list[Path]:
    """Return all routine sources in directory (recursive), sorted by path."""
    return sorted(p for p in directory.rglob(f"*{extension}") if p.is_file())


async def load_routines(
    config: LoaderConfig,
    gateway: DatabaseGateway,
    store: MetadataStore | None = None,
    doc_parser: Callable[[str], DocBlock] = parse_docblock
) -> LoadResult:
    """Load all routines of the configured source directory.

    Args:
        config: Loader configuration
        gateway: Database gateway (used for one routine at a time)
        store: Metadata store, defaults to the configured one
        doc_parser: DocBlock parser passed to the compiler

    Returns:
        LoadResult with the new metadata of all routines
    """
    if store is None:
        store = create_metadata_store(config.metadata)

    compiler = RoutineCompiler(
        gateway,
        sql_mode=config.database.sql_mode,
        character_set=config.database.character_set,
        collation=config.database.collation,
        doc_parser=doc_parser
    )
    replace_pairs = ReplacePairs(config.replace_pairs)
    previous_records = await store.load()
    result = LoadResult()

    sources = find_sources(config.sources.directory, config.sources.extension)
    logger.info(f"Found {len(sources)} routine sources in {config.sources.directory}")

    for path in sources:
        name = path.stem
        previous = previous_records.get(name)

        if name in result.metadata or name in result.failed:
            result.failed[name] = f"Duplicate routine source {path}"
            logger.error(f"Routine {name} is defined more than once ({path})")
            continue

        try:
            catalog_info = await gateway.routine_info(name)
            compiled = await compiler.compile(path, previous, replace_pairs, catalog_info)
        except UnknownPlaceholderError as e:
            logger.error(f"{e}\n{e.highlighted_source}")
            _keep_previous(result, name, previous, str(e))
            continue
        except RoutineLoaderError as e:
            logger.error(str(e))
            _keep_previous(result, name, previous, str(e))
            continue
        except Exception as e:
            logger.error(f"Database error while loading routine {name}: {e}")
            _keep_previous(result, name, previous, str(e))
            continue

        result.metadata[name] = compiled.metadata
        if compiled.reloaded:
            result.loaded.append(name)
        else:
            result.skipped.append(name)

    await store.save(result.metadata)

    logger.info(
        f"Loaded {len(result.loaded)} routines, {len(result.skipped)} up to date, "
        f"{len(result.failed)} failed"
    )
    return result


def _keep_previous(
    result: LoadResult,
    name: str,
    previous: RoutineMetadata | None,
    message: str
) -> None:
    result.failed[name] = message
    if previous is not None:
        result.metadata[name] = previous
