"""Column metadata of bulk insert target tables from `describe` output."""
from __future__ import annotations

import re
from typing import Any

from ..exceptions import UnsupportedColumnTypeError
from ..metadata.models import BulkInsertColumn

COLUMN_TYPE = re.compile(r"^(\w+)(.*)?$")
PRECISION = re.compile(r"^\((\d+)\)")
PRECISION_SCALE = re.compile(r"^\((\d+),(\d+)\)$")

INTEGER_TYPES = frozenset({"tinyint", "smallint", "mediumint", "int", "bigint"})
# Types without precision or scale.
PLAIN_TYPES = frozenset({
    "year",
    "binary", "char", "varbinary", "varchar",
    "time", "timestamp", "date", "datetime",
    "enum", "set", "json",
    "tinytext", "text", "mediumtext", "longtext",
    "tinyblob", "blob", "mediumblob", "longblob",
})


def column_from_description(row: dict[str, Any]) -> BulkInsertColumn:
    """Convert one `describe` row into a BulkInsertColumn.

    Raises:
        UnsupportedColumnTypeError: For unknown column types
    """
    column_type = str(row["Type"])
    match = COLUMN_TYPE.match(column_type)
    if not match:
        raise UnsupportedColumnTypeError(f"Unable to parse column type '{column_type}'")

    data_type, rest = match.group(1), match.group(2) or ""
    precision: int | None = None
    scale: int | None = None

    if data_type in INTEGER_TYPES:
        # MySQL 8 no longer reports a display width for integers.
        width = PRECISION.match(rest)
        precision = int(width.group(1)) if width else None
        scale = 0
    elif data_type == "float":
        precision = 12
    elif data_type == "double":
        precision = 22
    elif data_type == "decimal":
        parts = PRECISION_SCALE.match(rest.split()[0] if rest.strip() else "")
        if parts:
            precision, scale = int(parts.group(1)), int(parts.group(2))
    elif data_type == "bit":
        width = PRECISION.match(rest)
        precision = int(width.group(1)) if width else None
    elif data_type not in PLAIN_TYPES:
        raise UnsupportedColumnTypeError(
            f"Unsupported data type '{data_type}' of column '{row['Field']}'"
        )

    return BulkInsertColumn(
        column_name=row["Field"],
        data_type=data_type,
        numeric_precision=precision,
        numeric_scale=scale,
        dtd_identifier=column_type
    )


def columns_from_description(description: list[dict[str, Any]]) -> list[BulkInsertColumn]:
    """Convert `describe` rows into column metadata, in table order."""
    return [column_from_description(row) for row in description]
