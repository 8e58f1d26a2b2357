"""Persistence of compiled routine metadata between builds.

Two backends:
- JsonMetadataStore: one JSON file, suitable for a source checkout
- PostgresMetadataStore: one table in a PostgreSQL database (asyncpg)
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import asyncpg

from .models import RoutineMetadata

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class MetadataStore(Protocol):
    """Loads and saves the metadata of all routines."""

    async def load(self) -> dict[str, RoutineMetadata]:
        ...

    async def save(self, records: dict[str, RoutineMetadata]) -> None:
        ...


class JsonMetadataStore:
    """Metadata of all routines in a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def load(self) -> dict[str, RoutineMetadata]:
        if not self.path.exists():
            logger.info(f"No metadata file at {self.path}, starting fresh")
            return {}

        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        version = data.get("format_version")
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported metadata format version {version!r} in {self.path}")

        return {
            name: RoutineMetadata.model_validate(record)
            for name, record in data.get("routines", {}).items()
        }

    async def save(self, records: dict[str, RoutineMetadata]) -> None:
        data = {
            "format_version": FORMAT_VERSION,
            "routines": {
                name: records[name].model_dump(mode="json")
                for name in sorted(records)
            },
        }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        tmp_path.replace(self.path)

        logger.debug(f"Saved metadata of {len(records)} routines to {self.path}")


class PostgresMetadataStore:
    """Metadata of all routines in a PostgreSQL table."""

    def __init__(self, dsn: str, table: str = "routine_metadata") -> None:
        self.dsn = dsn
        self.table = table

    async def _ensure_table(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                routine_name TEXT PRIMARY KEY,
                metadata JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
            """
        )

    async def load(self) -> dict[str, RoutineMetadata]:
        conn = await asyncpg.connect(dsn=self.dsn)
        try:
            await self._ensure_table(conn)
            rows = await conn.fetch(
                f"SELECT routine_name, metadata::text AS metadata FROM {self.table}"
            )
        finally:
            await conn.close()

        return {
            row["routine_name"]: RoutineMetadata.model_validate_json(row["metadata"])
            for row in rows
        }

    async def save(self, records: dict[str, RoutineMetadata]) -> None:
        conn = await asyncpg.connect(dsn=self.dsn)
        try:
            await self._ensure_table(conn)
            async with conn.transaction():
                await conn.execute(
                    f"DELETE FROM {self.table} WHERE NOT (routine_name = ANY($1::text[]))",
                    list(records)
                )
                await conn.executemany(
                    f"""
                    INSERT INTO {self.table} (routine_name, metadata, updated_at)
                    VALUES ($1, $2::jsonb, now())
                    ON CONFLICT (routine_name)
                    DO UPDATE SET metadata = EXCLUDED.metadata, updated_at = now()
                    """,
                    [(name, record.model_dump_json()) for name, record in records.items()]
                )
        finally:
            await conn.close()

        logger.debug(f"Saved metadata of {len(records)} routines to table {self.table}")
