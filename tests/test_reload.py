"""Tests for the reload decision."""
import pytest

from routine_stratum.compiler.reload import must_reload, reload_reason
from routine_stratum.directives.placeholders import ReplacePairs
from routine_stratum.gateway import CatalogRoutineInfo
from routine_stratum.metadata.models import RoutineMetadata

SQL_MODE = "STRICT_ALL_TABLES"
CHARSET = "utf8mb4"
COLLATION = "utf8mb4_general_ci"
TIMESTAMP = 1700000000


@pytest.fixture
def previous():
    return RoutineMetadata(
        routine_name="get_user",
        designation="row1",
        timestamp=TIMESTAMP,
        replace={"@max_len@": "50", "@USR.NAME%type@": "varchar(50)"},
    )


@pytest.fixture
def catalog_info():
    return CatalogRoutineInfo(
        routine_type="procedure",
        sql_mode=SQL_MODE,
        character_set_client=CHARSET,
        collation_connection=COLLATION,
    )


@pytest.fixture
def replace_pairs():
    return ReplacePairs({"@MAX_LEN@": "50", "@USR.NAME%TYPE@": "varchar(50)", "@OTHER@": "1"})


def decide(previous, replace_pairs, catalog_info, timestamp=TIMESTAMP,
           sql_mode=SQL_MODE, charset=CHARSET, collation=COLLATION):
    return reload_reason(previous, timestamp, replace_pairs, catalog_info, sql_mode, charset, collation)


def test_up_to_date(previous, replace_pairs, catalog_info):
    assert decide(previous, replace_pairs, catalog_info) is None
    assert not must_reload(previous, TIMESTAMP, replace_pairs, catalog_info, SQL_MODE, CHARSET, COLLATION)


def test_decision_is_idempotent(previous, replace_pairs, catalog_info):
    """Deciding twice gives the same answer and leaves the record untouched."""
    before = previous.model_dump()

    assert decide(previous, replace_pairs, catalog_info) is None
    assert decide(previous, replace_pairs, catalog_info) is None
    assert previous.model_dump() == before


def test_first_sight(replace_pairs, catalog_info):
    assert decide(None, replace_pairs, catalog_info) == "new source file"


def test_source_changed(previous, replace_pairs, catalog_info):
    assert decide(previous, replace_pairs, catalog_info, timestamp=TIMESTAMP + 1) == "source file changed"


def test_placeholder_value_changed(previous, catalog_info):
    pairs = ReplacePairs({"@MAX_LEN@": "60", "@USR.NAME%TYPE@": "varchar(50)"})
    assert "changed" in decide(previous, pairs, catalog_info)


def test_placeholder_removed(previous, catalog_info):
    pairs = ReplacePairs({"@MAX_LEN@": "50"})
    assert "no longer defined" in decide(previous, pairs, catalog_info)


def test_routine_absent_from_database(previous, replace_pairs):
    assert decide(previous, replace_pairs, None) == "routine not found in database"


def test_sql_mode_changed(previous, replace_pairs, catalog_info):
    assert decide(previous, replace_pairs, catalog_info, sql_mode="ANSI") == "SQL mode changed"


def test_character_set_changed(previous, replace_pairs, catalog_info):
    assert decide(previous, replace_pairs, catalog_info, charset="latin1") == "character set changed"


def test_collation_changed(previous, replace_pairs, catalog_info):
    assert decide(previous, replace_pairs, catalog_info, collation="utf8mb4_bin") == "collation changed"


def test_order_of_checks(replace_pairs):
    """The first failing condition is reported."""
    stale = RoutineMetadata(routine_name="x", designation="none", timestamp=1, replace={"@GONE@": "1"})
    assert decide(stale, replace_pairs, None) == "source file changed"
