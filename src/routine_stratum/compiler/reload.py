"""Decides whether a routine must be (re)loaded into the database.

The previous metadata and the catalog info observed before the build are
compared against the current source timestamp, placeholder values and
session settings. A missed reload leaves a stale routine in the database,
so every listed condition must be checked.
"""
from __future__ import annotations

from collections.abc import Mapping

from ..gateway import CatalogRoutineInfo
from ..metadata.models import RoutineMetadata


def reload_reason(
    previous: RoutineMetadata | None,
    timestamp: int,
    replace_pairs: Mapping[str, str],
    catalog_info: CatalogRoutineInfo | None,
    sql_mode: str,
    character_set: str,
    collation: str
) -> str | None:
    """Return why a routine must be loaded, or None if it is up to date.

    Args:
        previous: Metadata of the previous build, None on first sight
        timestamp: Current modification time of the source file
        replace_pairs: Current placeholder values (keys upper case)
        catalog_info: Routine as found in the database, None if absent
        sql_mode: Configured SQL mode
        character_set: Configured character set
        collation: Configured collation

    Returns:
        Human readable reason, or None when no reload is needed
    """
    if previous is None:
        return "new source file"

    if previous.timestamp != timestamp:
        return "source file changed"

    for placeholder, old_value in previous.replace.items():
        key = placeholder.upper()
        if key not in replace_pairs:
            return f"placeholder {placeholder} no longer defined"
        if replace_pairs[key] != old_value:
            return f"value of placeholder {placeholder} changed"

    if catalog_info is None:
        return "routine not found in database"

    if catalog_info.sql_mode != sql_mode:
        return "SQL mode changed"

    if catalog_info.character_set_client != character_set:
        return "character set changed"

    if catalog_info.collation_connection != collation:
        return "collation changed"

    return None


def must_reload(
    previous: RoutineMetadata | None,
    timestamp: int,
    replace_pairs: Mapping[str, str],
    catalog_info: CatalogRoutineInfo | None,
    sql_mode: str,
    character_set: str,
    collation: str
) -> bool:
    """Return True if the routine must be (re)loaded."""
    return reload_reason(
        previous, timestamp, replace_pairs, catalog_info, sql_mode, character_set, collation
    ) is not None
