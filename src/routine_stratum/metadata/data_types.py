"""Mapping of MySQL data types to Python type hints for generated wrappers."""
from __future__ import annotations

INT_TYPES = frozenset({"bit", "tinyint", "smallint", "mediumint", "int", "integer", "bigint", "year"})
FLOAT_TYPES = frozenset({"float", "double", "real"})
DECIMAL_TYPES = frozenset({"decimal", "numeric"})
STRING_TYPES = frozenset({
    "char", "varchar", "tinytext", "text", "mediumtext", "longtext",
    "enum", "set", "json",
    "date", "time", "datetime", "timestamp",
})
BYTES_TYPES = frozenset({"binary", "varbinary", "tinyblob", "blob", "mediumblob", "longblob"})


def data_type_to_python_type(data_type: str) -> str:
    """Return the Python type hint of a value of a MySQL data type.

    Args:
        data_type: Bare data type name (e.g. "varchar", "int")

    Returns:
        Type hint as text, "Any" for unknown types
    """
    data_type = data_type.lower()

    if data_type in INT_TYPES:
        return "int"
    if data_type in FLOAT_TYPES:
        return "float"
    if data_type in DECIMAL_TYPES:
        return "Decimal"
    if data_type in STRING_TYPES:
        return "str"
    if data_type in BYTES_TYPES:
        return "bytes"

    return "Any"


def parameter_type_hint(data_type: str, extended_type: str | None = None) -> str:
    """Return the wrapper type hint of a parameter, always nullable.

    A parameter with an extended spec takes a list of its element type.
    """
    if extended_type:
        return f"list[{data_type_to_python_type(extended_type)}] | None"
    return f"{data_type_to_python_type(data_type)} | None"
