"""Tests for parameter reconciliation and bulk insert column description."""
import logging
import pytest

from routine_stratum.compiler.columns import column_from_description, columns_from_description
from routine_stratum.compiler.reconcile import (
    build_wrapper_doc_block,
    merge_extended_parameters,
    parameters_from_catalog,
    validate_parameter_lists,
)
from routine_stratum.directives.docblock import DocBlock
from routine_stratum.exceptions import UnknownExtendedParameterError, UnsupportedColumnTypeError
from routine_stratum.metadata.models import ExtendedParameterSpec

CATALOG_ROWS = [
    # Return value of a function has no name
    {"parameter_name": None, "data_type": "int", "dtd_identifier": "int"},
    {
        "parameter_name": "p_name",
        "data_type": "varchar",
        "dtd_identifier": "varchar(50)",
        "character_set_name": "utf8mb4",
        "collation_name": "utf8mb4_general_ci",
    },
    {
        "parameter_name": "p_ids",
        "data_type": "text",
        "dtd_identifier": "text",
        "character_set_name": "utf8mb4",
    },
    {
        "parameter_name": "p_amount",
        "data_type": "decimal",
        "dtd_identifier": "decimal(10,2)",
        "numeric_precision": 10,
        "numeric_scale": 2,
    },
]


class TestCatalogParameters:
    """Test parameters built from catalog rows."""

    def test_unnamed_rows_skipped(self):
        parameters = parameters_from_catalog(CATALOG_ROWS)
        assert [p.parameter_name for p in parameters] == ["p_name", "p_ids", "p_amount"]

    def test_data_type_descriptor(self):
        p_name, p_ids, p_amount = parameters_from_catalog(CATALOG_ROWS)

        assert p_name.data_type_descriptor == (
            "varchar(50) character set utf8mb4 collation utf8mb4_general_ci"
        )
        assert p_ids.data_type_descriptor == "text character set utf8mb4"
        assert p_amount.data_type_descriptor == "decimal(10,2)"
        assert (p_amount.numeric_precision, p_amount.numeric_scale) == (10, 2)


class TestExtendedParameters:
    """Test merging of `-- param:` specs."""

    def test_merge(self):
        spec = ExtendedParameterSpec(name="p_ids", data_type="int")
        parameters = merge_extended_parameters(parameters_from_catalog(CATALOG_ROWS), {"p_ids": spec})

        assert parameters[1].extended == spec
        assert parameters[0].extended is None
        assert parameters[1].data_type == "text"

    def test_unknown_parameter(self):
        spec = ExtendedParameterSpec(name="p_missing", data_type="int")
        with pytest.raises(UnknownExtendedParameterError):
            merge_extended_parameters(parameters_from_catalog(CATALOG_ROWS), {"p_missing": spec})


class TestWrapperDocBlock:
    """Test the DocBlock parts for the wrapper generator."""

    def test_parameters_zipped_by_name(self):
        spec = ExtendedParameterSpec(name="p_ids", data_type="int")
        parameters = merge_extended_parameters(parameters_from_catalog(CATALOG_ROWS), {"p_ids": spec})
        docblock = DocBlock(
            short_description="Short.",
            long_description="Long.",
            parameters=(("p_ids", "The ids."), ("p_name", "The name.")),
        )

        wrapper = build_wrapper_doc_block(docblock, parameters)

        assert wrapper.short_description == "Short."
        assert [p.parameter_name for p in wrapper.parameters] == ["p_name", "p_ids", "p_amount"]
        assert wrapper.parameters[0].description == "The name."
        assert wrapper.parameters[0].python_type == "str | None"
        assert wrapper.parameters[1].python_type == "list[int] | None"
        assert wrapper.parameters[2].python_type == "Decimal | None"
        assert wrapper.parameters[2].description is None

    def test_parameter_list_mismatches_are_warnings(self, caplog):
        parameters = parameters_from_catalog(CATALOG_ROWS)
        docblock = DocBlock(parameters=(("p_name", "The name."), ("p_typo", "Oops.")))

        with caplog.at_level(logging.WARNING):
            warnings = validate_parameter_lists("add_order", parameters, docblock)

        assert warnings == [
            "Parameter p_ids is missing from doc block",
            "Parameter p_amount is missing from doc block",
            "Unknown parameter p_typo found in doc block",
        ]
        assert "add_order: Unknown parameter p_typo" in caplog.text


class TestBulkInsertColumns:
    """Test column metadata from `describe` rows."""

    def test_column_types(self):
        columns = columns_from_description([
            {"Field": "id", "Type": "int(11) unsigned"},
            {"Field": "tiny", "Type": "tinyint"},
            {"Field": "name", "Type": "varchar(50)"},
            {"Field": "amount", "Type": "decimal(10,2)"},
            {"Field": "ratio", "Type": "double"},
            {"Field": "flags", "Type": "bit(8)"},
            {"Field": "kind", "Type": "enum('a','b')"},
        ])

        assert [(c.column_name, c.data_type, c.numeric_precision, c.numeric_scale) for c in columns] == [
            ("id", "int", 11, 0),
            ("tiny", "tinyint", None, 0),
            ("name", "varchar", None, None),
            ("amount", "decimal", 10, 2),
            ("ratio", "double", 22, None),
            ("flags", "bit", 8, None),
            ("kind", "enum", None, None),
        ]
        assert columns[0].dtd_identifier == "int(11) unsigned"

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedColumnTypeError):
            column_from_description({"Field": "location", "Type": "geometry"})
