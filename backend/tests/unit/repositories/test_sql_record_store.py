"""Integration tests for SqlRecordStore against in-memory SQLite.

These run the full listing pipeline pieces (normalizer → predicate
builder → SQL compiler) against real rows, so the SQL semantics can be
compared with the in-memory store's.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from app.domain.catalog.facets import count_facets
from app.domain.catalog.normalizer import normalize_filters
from app.domain.catalog.predicate_builder import build_predicate
from app.domain.catalog.registry import ADDRESSES, ASSETS, EVENTS, ORGANIZATIONS, SESSIONS
from app.domain.common.predicates import all_of, eq
from app.domain.common.query import FilterSpec, PageSpec, SortOrder, SortSpec
from app.infra.db.repositories.record_store import SqlRecordStore
from app.infra.db.uow import SqlUnitOfWork
from app.use_cases.catalog.list_records import ListRecordsQuery, ListRecordsUseCase
from app.models.catalog import (
    Address,
    ArchiveAsset,
    Event,
    EventSession,
    Location,
    LocationAddress,
    Organization,
    OrganizationLocation,
)

from .conftest import count_queries

T0 = datetime(2024, 1, 1, 12, 0, 0)


def _add(session, *rows):
    session.add_all(rows)
    session.flush()


def _ids(rows):
    return [r["id"] for r in rows]


def _filtered_ids(store, schema, params, sort=SortSpec("id", SortOrder.ASC)):
    where = all_of(schema.scope, build_predicate(schema, normalize_filters(schema, params)))
    return _ids(store.fetch(schema.name, where, sort))


# ── Assets ──────────────────────────────────────────────────────────────


@pytest.fixture
def assets(session):
    _add(
        session,
        ArchiveAsset(
            id="a1", metadata_source="gdrive", name="Lam Rim Day 1.mp4", asset_type="video",
            file_format="mp4", is_media_file=True, cataloging_status="Ready",
            oral_translation_languages=["English", "French"], safe_to_delete_from_gdrive=True,
            original_date=datetime(2019, 7, 13, 9, 30), created_at=T0,
        ),
        ArchiveAsset(
            id="a2", metadata_source="gdrive", name="Lam Rim Day 2.mov", asset_type="video",
            file_format="mov", is_media_file=False, cataloging_status=None,
            oral_translation_languages=["Tibetan"], safe_to_delete_from_gdrive=False,
            original_date=datetime(2020, 12, 31, 22, 0), created_at=T0 + timedelta(hours=1),
        ),
        ArchiveAsset(
            id="a3", metadata_source="youtube", title="Q&A 100% unedited", asset_type="audio",
            file_format="wav", is_media_file=None, cataloging_status="Not Started",
            oral_translation_languages=None, safe_to_delete_from_gdrive=None,
            original_date=None, created_at=T0 + timedelta(hours=2),
        ),
    )


@pytest.mark.usefixtures("assets")
class TestAssetFilters:
    def test_count_all(self, store):
        assert store.count("assets", None) == 3

    def test_multi_select_or_within_field(self, store):
        assert _filtered_ids(store, ASSETS, {"formats": "mp4,wav"}) == ["a1", "a3"]

    def test_status_null_sentinel(self, store):
        assert _filtered_ids(store, ASSETS, {"status": "null"}) == ["a2"]

    def test_null_as_false_boolean(self, store):
        assert _filtered_ids(store, ASSETS, {"safe_to_delete": "false"}) == ["a2", "a3"]
        assert _filtered_ids(store, ASSETS, {"safe_to_delete": "true"}) == ["a1"]

    def test_strict_boolean(self, store):
        assert _filtered_ids(store, ASSETS, {"is_media_file": "false"}) == ["a2"]

    def test_text_search_is_case_insensitive_across_columns(self, store):
        assert _filtered_ids(store, ASSETS, {"search": "lam rim"}) == ["a1", "a2"]
        assert _filtered_ids(store, ASSETS, {"search": "q&a"}) == ["a3"]

    def test_text_search_treats_wildcards_literally(self, store):
        assert _filtered_ids(store, ASSETS, {"search": "100%"}) == ["a3"]
        assert _filtered_ids(store, ASSETS, {"search": "_"}) == []

    def test_array_language_filter(self, store):
        assert _filtered_ids(store, ASSETS, {"interpreter_langs": "French,Tibetan"}) == ["a1", "a2"]
        assert _filtered_ids(store, ASSETS, {"interpreter_langs": "German"}) == []

    def test_fuzzy_date(self, store):
        assert _filtered_ids(store, ASSETS, {"date_search": "2019-07"}) == ["a1"]

    def test_date_range_includes_the_whole_last_day(self, store):
        params = {"date_from": "2020-01-01", "date_to": "2020-12-31"}
        assert _filtered_ids(store, ASSETS, params) == ["a2"]

    def test_conjunction_across_fields(self, store):
        assert _filtered_ids(store, ASSETS, {"type": "video", "formats": "mov,wav"}) == ["a2"]

    def test_default_sort_newest_first(self, store):
        rows = store.fetch("assets", None, SortSpec("created_at", SortOrder.DESC))
        assert _ids(rows) == ["a3", "a2", "a1"]

    def test_nulls_sort_last_both_ways(self, store):
        asc = store.fetch("assets", None, SortSpec("original_date", SortOrder.ASC))
        desc = store.fetch("assets", None, SortSpec("original_date", SortOrder.DESC))
        assert _ids(asc) == ["a1", "a2", "a3"]
        assert _ids(desc) == ["a2", "a1", "a3"]

    def test_rows_carry_json_lists(self, store):
        row = store.fetch("assets", eq("id", "a1"), SortSpec("id"))[0]
        assert row["oral_translation_languages"] == ["English", "French"]

    def test_facets(self, store):
        facets = count_facets(store, ASSETS, FilterSpec())
        assert facets.tallies == {
            "total": 3, "ready": 1, "in_progress": 0, "not_started": 2, "video": 2, "audio": 1,
        }
        assert [o.value for o in facets.options["languages"]] == ["English", "French", "Tibetan"]
        assert [o.value for o in facets.options["formats"]] == ["mov", "mp4", "wav"]


# ── Pagination ──────────────────────────────────────────────────────────


class TestPagination:
    @pytest.fixture(autouse=True)
    def locations(self, session):
        _add(
            session,
            *(
                Location(id=f"loc-{i:04d}", code=f"L{i:04d}", name=f"Location {i:04d}",
                         created_at=T0 + timedelta(minutes=i))
                for i in range(120)
            ),
        )

    def test_page_three_of_one_hundred_twenty(self, store):
        rows = store.fetch(
            "locations", None, SortSpec("created_at", SortOrder.ASC), PageSpec(page=3, per_page=50)
        )
        assert len(rows) == 20
        assert rows[0]["id"] == "loc-0100"

    def test_page_past_the_end(self, store):
        rows = store.fetch("locations", None, SortSpec("created_at"), PageSpec(page=4, per_page=50))
        assert rows == []

    def test_count_is_one_statement(self, store, engine):
        with count_queries(engine) as counter:
            assert store.count("locations", None) == 120
        assert counter["count"] == 1


# ── Events & sessions ──────────────────────────────────────────────────


@pytest.fixture
def events(session):
    _add(
        session,
        Location(id="loc-1", name="Kopan Monastery", created_at=T0),
        Organization(id="org-1", name="FPMT", created_at=T0),
    )
    _add(
        session,
        Event(
            id="e1", event_id="E1", event_name="November Course", event_type="course",
            event_date_start=date(2020, 11, 1), location_id="loc-1", organizer_id="org-1",
            cataloging_status="Ready", harvest_source=None,
            additional_metadata={"hosting_center": "Kopan", "country_raw": "Nepal"},
            created_at=T0,
        ),
    )
    _add(
        session,
        Event(
            id="e2", event_id="E2", event_name="Week 1", parent_event_id="e1",
            event_date_start=date(2020, 11, 8), harvest_source="sheet", created_at=T0,
        ),
        Event(
            id="e3", event_id="E3", event_name="Week 0", parent_event_id="e1",
            event_date_start=date(2020, 11, 1), harvest_source="sheet", created_at=T0,
        ),
    )
    _add(
        session,
        EventSession(id="s1", session_id="S1", event_id="e1", session_name="Opening",
                     sequence_in_event=2, has_assets=True, created_at=T0),
        EventSession(id="s2", session_id="S2", event_id="e1", session_name="Refuge",
                     sequence_in_event=1, has_assets=None, created_at=T0),
    )
    _add(
        session,
        ArchiveAsset(id="a1", metadata_source="gdrive", session_id="s1", created_at=T0),
        ArchiveAsset(id="a2", metadata_source="gdrive", session_id="s2", created_at=T0),
        ArchiveAsset(id="a3", metadata_source="gdrive", session_id="s2", created_at=T0),
    )


@pytest.mark.usefixtures("events")
class TestEvents:
    def test_derived_counts_and_names(self, store):
        row = store.fetch("events", eq("id", "e1"), SortSpec("id"))[0]
        assert row["location_name"] == "Kopan Monastery"
        assert row["organizer_name"] == "FPMT"
        assert row["session_count"] == 2
        assert row["asset_count"] == 3
        assert row["child_event_count"] == 2
        assert row["parent_event_name"] is None
        child = store.fetch("events", eq("id", "e2"), SortSpec("id"))[0]
        assert child["parent_event_name"] == "November Course"

    def test_top_level_view(self, store):
        assert _filtered_ids(store, EVENTS, {"view": "top-level"}) == ["e1"]

    def test_source_null_sentinel(self, store):
        assert _filtered_ids(store, EVENTS, {"source": "null"}) == ["e1"]

    def test_metadata_key_filter(self, store):
        assert _filtered_ids(store, EVENTS, {"hosting_center": "Kopan"}) == ["e1"]
        assert _filtered_ids(store, EVENTS, {"country": "Nepal"}) == ["e1"]

    def test_metadata_search(self, store):
        assert _filtered_ids(store, EVENTS, {"metadata_search": "kopan"}) == ["e1"]

    def test_date_range_on_date_column(self, store):
        params = {"date_from": "2020-11-01", "date_to": "2020-11-01"}
        assert _filtered_ids(store, EVENTS, params) == ["e1", "e3"]

    def test_labelled_enumerations(self, store):
        facets = count_facets(store, EVENTS, FilterSpec())
        assert [(o.value, o.label) for o in facets.options["locations"]] == [
            ("loc-1", "Kopan Monastery")
        ]
        assert [o.value for o in facets.options["hosting_centers"]] == ["Kopan"]
        assert facets.tallies["top_level"] == 1
        assert facets.tallies["not_started"] == 2

    def test_sessions_has_assets_false_includes_nulls(self, store):
        assert _filtered_ids(store, SESSIONS, {"has_assets": "false"}) == ["s2"]

    def test_session_event_name(self, store):
        rows = store.fetch("sessions", None, SortSpec("sequence_in_event", SortOrder.ASC))
        assert _ids(rows) == ["s2", "s1"]
        assert rows[0]["event_name"] == "November Course"


# ── Organizations & addresses ──────────────────────────────────────────


@pytest.fixture
def organizations(session):
    _add(
        session,
        Organization(id="o1", code="FPMT", name="Foundation", org_type="network", created_at=T0),
        Organization(id="o2", code="TBI", name="Institute", org_type="center", created_at=T0),
        Organization(id="o3", code="NOP", name="Nomad", org_type="center", created_at=T0),
        Location(id="l1", name="Kathmandu office", created_at=T0),
        Location(id="l2", name="Portland office", created_at=T0),
        Address(id="ad1", city="Kathmandu", country="Nepal", created_at=T0),
        Address(id="ad2", city="Portland", state_province="OR", country="USA", created_at=T0),
        Address(id="ad3", city="Old", country="Gone", created_at=T0, deleted_at=T0),
    )
    _add(
        session,
        OrganizationLocation(organization_id="o1", location_id="l1", is_primary=True),
        OrganizationLocation(organization_id="o2", location_id="l2", is_primary=True),
        OrganizationLocation(organization_id="o3", location_id="l1", is_primary=False),
        LocationAddress(location_id="l1", address_id="ad1", is_primary=True),
        LocationAddress(location_id="l2", address_id="ad2", is_primary=True),
    )


@pytest.mark.usefixtures("organizations")
class TestOrganizationsAndAddresses:
    def test_primary_address_fields(self, store):
        rows = store.fetch("organizations", None, SortSpec("primary_country", SortOrder.ASC))
        assert _ids(rows) == ["o1", "o2", "o3"]
        assert rows[1]["primary_state_province"] == "OR"
        assert rows[2]["primary_country"] is None

    def test_country_filter_uses_primary_address(self, store):
        assert _filtered_ids(store, ORGANIZATIONS, {"country": "Nepal"}) == ["o1"]

    def test_search_reaches_primary_city(self, store):
        assert _filtered_ids(store, ORGANIZATIONS, {"search": "portland"}) == ["o2"]
        assert _filtered_ids(store, ORGANIZATIONS, {"search": "tbi"}) == ["o2"]

    def test_country_enumeration(self, store):
        facets = count_facets(store, ORGANIZATIONS, FilterSpec())
        assert [o.value for o in facets.options["countries"]] == ["Nepal", "USA"]

    def test_addresses_scope_hides_deleted(self, store):
        assert _filtered_ids(store, ADDRESSES, {}) == ["ad1", "ad2"]
        facets = count_facets(store, ADDRESSES, FilterSpec())
        assert facets.tallies == {"total": 2}
        assert [o.value for o in facets.options["countries"]] == ["Nepal", "USA"]


# ── Non-ASCII text ─────────────────────────────────────────────────────


class TestNonAsciiText:
    @pytest.fixture(autouse=True)
    def rows(self, session):
        _add(
            session,
            Event(
                id="e1", event_id="E1", event_name="Bodhgayā Teachings", created_at=T0,
                additional_metadata={"location_raw": "Bodhgayā", "note": "ལམ་རིམ"},
            ),
            Event(
                id="e2", event_id="E2", event_name="Kopan Course", created_at=T0,
                additional_metadata={"location_raw": "Kathmandu"},
            ),
            ArchiveAsset(
                id="a1", metadata_source="gdrive", created_at=T0,
                oral_translation_languages=["བོད་སྐད", "Français"],
            ),
            ArchiveAsset(
                id="a2", metadata_source="gdrive", created_at=T0,
                oral_translation_languages=["English"],
            ),
        )

    def test_metadata_search_matches_diacritics(self, store):
        assert _filtered_ids(store, EVENTS, {"metadata_search": "Bodhgayā"}) == ["e1"]
        assert _filtered_ids(store, EVENTS, {"metadata_search": "bodhgayā"}) == ["e1"]

    def test_metadata_search_matches_tibetan_script(self, store):
        assert _filtered_ids(store, EVENTS, {"metadata_search": "ལམ"}) == ["e1"]

    def test_metadata_key_filter(self, store):
        assert _filtered_ids(store, EVENTS, {"location_text": "Bodhgayā"}) == ["e1"]

    def test_array_filter_with_non_ascii_element(self, store):
        assert _filtered_ids(store, ASSETS, {"interpreter_langs": "བོད་སྐད"}) == ["a1"]
        assert _filtered_ids(store, ASSETS, {"interpreter_langs": "Français"}) == ["a1"]

    def test_flattened_enumeration_keeps_script(self, store):
        facets = count_facets(store, ASSETS, FilterSpec())
        assert {o.value for o in facets.options["languages"]} == {"བོད་སྐད", "Français", "English"}


# ── Unit of Work ───────────────────────────────────────────────────────


def test_uow_exposes_a_record_store(session_factory):
    uow = SqlUnitOfWork(session_factory)
    with uow:
        assert isinstance(uow.records, SqlRecordStore)
        assert uow.records.count("assets", None) == 0


def test_huge_page_number_lists_nothing(session, session_factory, assets):
    session.commit()
    result = ListRecordsUseCase().execute(
        SqlUnitOfWork(session_factory),
        ListRecordsQuery(record_type="assets", page="99999999999999999999"),
    )
    page = result.listing.page
    assert page.page == 99999999999999999999
    assert page.items == ()
    assert page.total == 3
    assert page.total_pages == 1
