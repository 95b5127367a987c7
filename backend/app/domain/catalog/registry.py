"""Record types of the archive catalog and what each list view offers.

Field names on the right-hand side (``columns``, sort targets, tally
predicates) are *store fields*: the keys of a listed row.  The SQL store
maps each of them to a column, JSON key or correlated subquery.

Boolean filters that treat a never-filled column as ``false`` are marked
``null_as_false``; the rest match the stored value strictly.
"""

from __future__ import annotations

from app.domain.common.errors import EntityNotFoundError
from app.domain.common.predicates import any_of, eq, is_null

from .fields import FacetEnumeration, FacetTally, FilterField, FilterKind, RecordSchema

NULL_TOKEN = "null"

_READY = eq("cataloging_status", "Ready")
_IN_PROGRESS = eq("cataloging_status", "In Progress")
_NOT_STARTED = any_of(is_null("cataloging_status"), eq("cataloging_status", "Not Started"))


def _status_field() -> FilterField:
    return FilterField(
        "status",
        FilterKind.EXACT,
        ("cataloging_status",),
        null_token=NULL_TOKEN,
    )


def _status_tallies() -> tuple[FacetTally, ...]:
    return (
        FacetTally("ready", _READY),
        FacetTally("in_progress", _IN_PROGRESS),
        FacetTally("not_started", _NOT_STARTED),
    )


ASSETS = RecordSchema(
    name="assets",
    description="Archive media and document files.",
    filters=(
        FilterField("search", FilterKind.TEXT, ("name", "title", "filepath")),
        _status_field(),
        FilterField("type", FilterKind.EXACT, ("asset_type",)),
        FilterField("source", FilterKind.EXACT, ("metadata_source",)),
        FilterField("is_media_file", FilterKind.BOOLEAN, ("is_media_file",)),
        FilterField("formats", FilterKind.MULTI_SELECT, ("file_format",)),
        FilterField(
            "interpreter_langs",
            FilterKind.MULTI_SELECT,
            ("oral_translation_languages",),
            array=True,
        ),
        FilterField(
            "transcript_langs",
            FilterKind.MULTI_SELECT,
            ("transcript_languages",),
            array=True,
        ),
        FilterField(
            "has_timestamped_transcript",
            FilterKind.EXACT,
            ("has_timestamped_transcript",),
            choices=("Yes", "Partial", "No"),
        ),
        FilterField(
            "transcripts_available",
            FilterKind.BOOLEAN,
            ("transcripts_available",),
            null_as_false=True,
        ),
        FilterField(
            "needs_detailed_review",
            FilterKind.BOOLEAN,
            ("needs_detailed_review",),
            null_as_false=True,
        ),
        FilterField(
            "has_oral_translation",
            FilterKind.BOOLEAN,
            ("has_oral_translation",),
            null_as_false=True,
        ),
        FilterField(
            "safe_to_delete",
            FilterKind.BOOLEAN,
            ("safe_to_delete_from_gdrive",),
            null_as_false=True,
        ),
        FilterField("exclude", FilterKind.BOOLEAN, ("remove_file",), null_as_false=True),
        FilterField("date_search", FilterKind.FUZZY_DATE, ("original_date", "created_date")),
        FilterField("date", FilterKind.DATE_RANGE, ("original_date",)),
    ),
    sort_fields={
        "created_at": "created_at",
        "name": "name",
        "title": "title",
        "original_date": "original_date",
        "type": "asset_type",
        "status": "cataloging_status",
    },
    default_sort="created_at",
    tallies=(
        FacetTally("total"),
        *_status_tallies(),
        FacetTally("video", eq("asset_type", "video")),
        FacetTally("audio", eq("asset_type", "audio")),
    ),
    enumerations=(
        FacetEnumeration("asset_types", "asset_type"),
        FacetEnumeration("sources", "metadata_source"),
        FacetEnumeration("formats", "file_format"),
        FacetEnumeration("languages", "oral_translation_languages", flatten=True),
        FacetEnumeration("transcript_languages", "transcript_languages", flatten=True),
    ),
)


EVENTS = RecordSchema(
    name="events",
    description="Teaching events; an event may be nested under a parent event.",
    filters=(
        FilterField("search", FilterKind.TEXT, ("event_name",)),
        _status_field(),
        FilterField("type", FilterKind.EXACT, ("event_type",)),
        FilterField("source", FilterKind.EXACT, ("harvest_source",), null_token=NULL_TOKEN),
        FilterField(
            "view",
            FilterKind.EXACT,
            ("parent_event_id",),
            choices=("top-level",),
            value_predicates={"top-level": is_null("parent_event_id")},
        ),
        FilterField("location", FilterKind.EXACT, ("location_id",)),
        FilterField("organizer", FilterKind.EXACT, ("organizer_id",)),
        FilterField("hosting_center", FilterKind.EXACT, ("hosting_center",)),
        FilterField("country", FilterKind.EXACT, ("country_raw",)),
        FilterField("location_text", FilterKind.EXACT, ("location_raw",)),
        FilterField("metadata_search", FilterKind.TEXT, ("additional_metadata",)),
        FilterField("date_search", FilterKind.FUZZY_DATE, ("event_date_start", "event_date_end")),
        FilterField("date", FilterKind.DATE_RANGE, ("event_date_start",)),
    ),
    sort_fields={
        "created_at": "created_at",
        "event_name": "event_name",
        "event_date_start": "event_date_start",
        "event_date_end": "event_date_end",
    },
    default_sort="created_at",
    tallies=(
        FacetTally("total"),
        FacetTally("top_level", is_null("parent_event_id")),
        *_status_tallies(),
    ),
    enumerations=(
        FacetEnumeration("types", "event_type"),
        FacetEnumeration("locations", "location_id", label_field="location_name"),
        FacetEnumeration("organizers", "organizer_id", label_field="organizer_name"),
        FacetEnumeration("hosting_centers", "hosting_center"),
        FacetEnumeration("countries", "country_raw"),
        FacetEnumeration("location_texts", "location_raw"),
    ),
)


SESSIONS = RecordSchema(
    name="sessions",
    description="Individual sessions of an event.",
    filters=(
        FilterField("search", FilterKind.TEXT, ("session_name", "session_id")),
        _status_field(),
        FilterField("event", FilterKind.EXACT, ("event_id",)),
        FilterField("has_assets", FilterKind.BOOLEAN, ("has_assets",), null_as_false=True),
        FilterField("date_search", FilterKind.FUZZY_DATE, ("session_date",)),
        FilterField("date", FilterKind.DATE_RANGE, ("session_date",)),
    ),
    sort_fields={
        "created_at": "created_at",
        "session_name": "session_name",
        "session_date": "session_date",
        "sequence": "sequence_in_event",
        "event_name": "event_name",
    },
    default_sort="created_at",
    tallies=(
        FacetTally("total"),
        *_status_tallies(),
        FacetTally("with_assets", eq("has_assets", True)),
    ),
    enumerations=(FacetEnumeration("events", "event_id", label_field="event_name"),),
)


LOCATIONS = RecordSchema(
    name="locations",
    filters=(
        FilterField("search", FilterKind.TEXT, ("name", "code", "city")),
        FilterField("type", FilterKind.EXACT, ("location_type",)),
        FilterField("country", FilterKind.EXACT, ("country",)),
    ),
    sort_fields={
        "created_at": "created_at",
        "name": "name",
        "code": "code",
        "type": "location_type",
        "city": "city",
        "country": "country",
    },
    default_sort="created_at",
    tallies=(FacetTally("total"),),
    enumerations=(
        FacetEnumeration("types", "location_type"),
        FacetEnumeration("countries", "country"),
    ),
)


ORGANIZATIONS = RecordSchema(
    name="organizations",
    description="Organizations; city and country come from the primary location's primary address.",
    filters=(
        FilterField("search", FilterKind.TEXT, ("name", "code", "primary_city")),
        FilterField("type", FilterKind.EXACT, ("org_type",)),
        FilterField("country", FilterKind.EXACT, ("primary_country",)),
    ),
    sort_fields={
        "name": "name",
        "code": "code",
        "type": "org_type",
        "city": "primary_city",
        "state_province": "primary_state_province",
        "country": "primary_country",
        "created_at": "created_at",
    },
    default_sort="name",
    tallies=(FacetTally("total"),),
    enumerations=(
        FacetEnumeration("types", "org_type"),
        FacetEnumeration("countries", "primary_country"),
    ),
)


ADDRESSES = RecordSchema(
    name="addresses",
    filters=(
        FilterField("search", FilterKind.TEXT, ("label", "city", "country", "full_address")),
        FilterField("country", FilterKind.EXACT, ("country",)),
    ),
    sort_fields={
        "created_at": "created_at",
        "label": "label",
        "city": "city",
        "country": "country",
    },
    default_sort="created_at",
    tallies=(FacetTally("total"),),
    enumerations=(FacetEnumeration("countries", "country"),),
    scope=is_null("deleted_at"),
)


RECORD_SCHEMAS: dict[str, RecordSchema] = {
    schema.name: schema
    for schema in (ASSETS, EVENTS, SESSIONS, LOCATIONS, ORGANIZATIONS, ADDRESSES)
}


def get_record_schema(record_type: str) -> RecordSchema:
    try:
        return RECORD_SCHEMAS[record_type]
    except KeyError:
        raise EntityNotFoundError("Record type", record_type) from None


__all__ = [
    "NULL_TOKEN",
    "ASSETS",
    "EVENTS",
    "SESSIONS",
    "LOCATIONS",
    "ORGANIZATIONS",
    "ADDRESSES",
    "RECORD_SCHEMAS",
    "get_record_schema",
]
