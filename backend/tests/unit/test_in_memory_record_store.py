"""Unit tests for InMemoryRecordStore: predicate evaluation, sorting, paging."""

from datetime import date, datetime

import pytest

from app.domain.catalog.normalizer import normalize_filters
from app.domain.catalog.predicate_builder import build_predicate
from app.domain.catalog.registry import ASSETS, SESSIONS
from app.domain.common.predicates import contains, eq, ge, has, in_, is_null, le
from app.domain.common.query import PageSpec, SortOrder, SortSpec
from app.infra.memory.record_store import InMemoryRecordStore, matches, sort_rows

from tests.unit.catalog_fakes import make_asset, make_locations, make_session


def _ids(rows):
    return [r["id"] for r in rows]


def _matching_ids(schema, rows, params):
    pred = build_predicate(schema, normalize_filters(schema, params))
    return sorted(r["id"] for r in rows if matches(r, pred))


class TestMatches:
    def test_none_matches_everything(self):
        assert matches({"id": "x"}, None)

    def test_null_never_satisfies_a_comparison(self):
        row = {"id": "x", "name": None}
        assert not matches(row, eq("name", None))
        assert not matches(row, contains("name", ""))
        assert matches(row, is_null("name"))

    def test_contains_is_case_insensitive(self):
        assert matches({"name": "Lam Rim Teachings"}, contains("name", "lam rim"))

    def test_contains_over_datetime_rendering(self):
        assert matches({"d": datetime(2019, 7, 13, 10, 0)}, contains("d", "2019-07"))

    def test_contains_over_json_matches_non_ascii(self):
        row = {"additional_metadata": {"location_raw": "Bodhgayā", "note": "ལམ་རིམ"}}
        assert matches(row, contains("additional_metadata", "Bodhgayā"))
        assert matches(row, contains("additional_metadata", "ལམ"))

    def test_date_column_against_whole_day_bounds(self):
        row = {"d": date(2020, 6, 1)}
        assert matches(row, ge("d", datetime(2020, 6, 1, 0, 0)))
        assert matches(row, le("d", datetime(2020, 6, 1, 23, 59, 59, 999999)))
        assert not matches(row, ge("d", datetime(2020, 6, 2, 0, 0)))

    def test_has_requires_a_list(self):
        assert matches({"langs": ["English"]}, has("langs", "English"))
        assert not matches({"langs": "English"}, has("langs", "English"))

    def test_in(self):
        assert matches({"f": "mp4"}, in_("f", {"mp4", "mov"}))
        assert not matches({"f": "wav"}, in_("f", {"mp4", "mov"}))


class TestFilterSemantics:
    ROWS = [
        make_asset("a", file_format="A"),
        make_asset("b", file_format="B"),
        make_asset("c", file_format="C"),
    ]

    def test_multi_select_accepts_any_selected_value(self):
        assert _matching_ids(ASSETS, self.ROWS, {"formats": "A,B"}) == ["a", "b"]

    BOOL_ROWS = [
        make_asset("yes", safe_to_delete_from_gdrive=True, is_media_file=True),
        make_asset("no", safe_to_delete_from_gdrive=False, is_media_file=False),
        make_asset("unset", safe_to_delete_from_gdrive=None, is_media_file=None),
    ]

    def test_null_as_false_boolean(self):
        assert _matching_ids(ASSETS, self.BOOL_ROWS, {"safe_to_delete": "false"}) == ["no", "unset"]
        assert _matching_ids(ASSETS, self.BOOL_ROWS, {"safe_to_delete": "true"}) == ["yes"]

    def test_strict_boolean(self):
        assert _matching_ids(ASSETS, self.BOOL_ROWS, {"is_media_file": "false"}) == ["no"]
        assert _matching_ids(ASSETS, self.BOOL_ROWS, {"is_media_file": "true"}) == ["yes"]

    def test_sessions_without_assets_include_legacy_nulls(self):
        rows = [
            make_session("s1", has_assets=True),
            make_session("s2", has_assets=False),
            make_session("s3", has_assets=None),
        ]
        assert _matching_ids(SESSIONS, rows, {"has_assets": "false"}) == ["s2", "s3"]


class TestSortRows:
    ROWS = [
        {"id": "3", "name": "beta"},
        {"id": "1", "name": None},
        {"id": "2", "name": "alpha"},
        {"id": "4", "name": "beta"},
    ]

    def test_ascending_nulls_last_with_key_tiebreak(self):
        assert _ids(sort_rows(self.ROWS, SortSpec("name", SortOrder.ASC))) == ["2", "3", "4", "1"]

    def test_descending_nulls_still_last(self):
        assert _ids(sort_rows(self.ROWS, SortSpec("name", SortOrder.DESC))) == ["4", "3", "2", "1"]


class TestStore:
    @pytest.fixture
    def store(self):
        return InMemoryRecordStore({"locations": make_locations(120)})

    def test_count(self, store):
        assert store.count("locations", None) == 120
        assert store.count("locations", eq("code", "L0005")) == 1
        assert store.count("unknown", None) == 0

    def test_page_three_has_the_remaining_twenty(self, store):
        rows = store.fetch(
            "locations", None, SortSpec("created_at", SortOrder.ASC), PageSpec(page=3, per_page=50)
        )
        assert len(rows) == 20
        assert rows[0]["id"] == "loc-0100"

    def test_page_past_the_end_is_empty(self, store):
        rows = store.fetch("locations", None, SortSpec("created_at"), PageSpec(page=9, per_page=50))
        assert rows == []

    def test_fetched_rows_are_copies(self, store):
        row = store.fetch("locations", eq("id", "loc-0001"), SortSpec("created_at"))[0]
        row["name"] = "changed"
        assert store.fetch("locations", eq("id", "loc-0001"), SortSpec("created_at"))[0]["name"] == (
            "Location 0001"
        )

    def test_exists(self, store):
        assert store.exists("locations", "loc-0001")
        assert not store.exists("locations", "loc-9999")
