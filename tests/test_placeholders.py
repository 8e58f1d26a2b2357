"""Tests for placeholder expansion and substitution."""
import pytest

from routine_stratum.directives.placeholders import (
    ReplacePairs,
    expand_placeholders,
    find_placeholders,
    substitute,
)
from routine_stratum.exceptions import UnknownPlaceholderError


class TestReplacePairs:
    """Test the case-insensitive placeholder table."""

    def test_lookup_is_case_insensitive(self):
        pairs = ReplacePairs({"@foo@": "1"})

        assert "@FOO@" in pairs
        assert "@Foo@" in pairs
        assert pairs["@foo@"] == "1"
        assert list(pairs) == ["@FOO@"]

    def test_values_are_strings(self):
        pairs = ReplacePairs({"@MAX@": 10})
        assert pairs["@MAX@"] == "10"


class TestExpandPlaceholders:
    """Test resolving placeholders found in a source."""

    def test_case_insensitive_resolution(self):
        """A table keyed @FOO@ resolves @foo@ in the source."""
        replace = expand_placeholders("select @foo@;", {"@FOO@": "1"})

        assert replace == {"@foo@": "1"}

    def test_type_placeholder(self):
        """Should resolve column type placeholders."""
        replace = expand_placeholders(
            "declare l_name @usr.usr_name%type@;",
            {"@USR.USR_NAME%TYPE@": "varchar(50) character set utf8mb4"}
        )

        assert replace == {"@usr.usr_name%type@": "varchar(50) character set utf8mb4"}

    def test_only_used_placeholders_sorted(self):
        """Unused table entries are ignored and the result is sorted by token."""
        text = "select @B@, @A@, @B@;"
        replace = expand_placeholders(text, {"@A@": "1", "@B@": "2", "@UNUSED@": "3"})

        assert list(replace) == ["@A@", "@B@"]

    def test_only_unknown_placeholders_reported(self):
        """@A@ resolves, so only @B@ is reported as unknown."""
        with pytest.raises(UnknownPlaceholderError) as exc_info:
            expand_placeholders("select @A@, @B@;", {"@A@": "1"})

        assert exc_info.value.placeholders == ["@B@"]
        assert ">>>@B@<<<" in exc_info.value.highlighted_source
        assert ">>>@A@<<<" not in exc_info.value.highlighted_source

    def test_all_unknown_placeholders_reported_together(self):
        with pytest.raises(UnknownPlaceholderError) as exc_info:
            expand_placeholders("select @C@, @B@, @A@;", {"@A@": "1"})

        assert exc_info.value.placeholders == ["@B@", "@C@"]
        assert "@B@" in str(exc_info.value)
        assert "@C@" in str(exc_info.value)

    def test_no_placeholders(self):
        assert expand_placeholders("select 1;", {}) == {}

    def test_find_placeholders(self):
        text = "@a@ @a@ @x.y%type@ @not a placeholder@ user@example"
        assert find_placeholders(text) == ["@a@", "@x.y%type@"]


class TestSubstitute:
    """Test single-pass substitution."""

    def test_longest_key_wins(self):
        assert substitute("abc ab", {"ab": "1", "abc": "2"}) == "2 1"

    def test_replaced_text_not_rescanned(self):
        assert substitute("ab", {"a": "b", "b": "c"}) == "bc"

    def test_empty_replace(self):
        assert substitute("select 1;", {}) == "select 1;"
