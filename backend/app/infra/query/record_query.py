"""SQLAlchemy query builder for catalog listings.

Translates the domain predicate tree, ``SortSpec`` and ``PageSpec`` into
SQLAlchemy WHERE, ORDER BY and LIMIT/OFFSET clauses.  Every store field a
record schema mentions resolves through a per-record-type column map to
a plain column, a JSON key (``column["key"].as_string()``) or a correlated
scalar subquery for values that live on related rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from sqlalchemy import Date, Select, String, and_, cast, func, or_, select, true
from sqlalchemy.orm import aliased
from sqlalchemy.sql.elements import ColumnElement

from app.domain.common.predicates import AllOf, AnyOf, Condition, Op, Predicate
from app.domain.common.query import PageSpec, SortOrder, SortSpec
from app.infra.serialization import dump_json
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


class UnknownFieldError(KeyError):
    """A predicate or sort names a store field the record type does not map."""


@dataclass(frozen=True)
class RecordTable:
    """The mapped entity of one record type plus its field expressions."""

    entity: Any
    columns: Mapping[str, ColumnElement]
    primary_key: str = "id"

    def column(self, field: str) -> ColumnElement:
        try:
            return self.columns[field]
        except KeyError:
            raise UnknownFieldError(field) from None

    def select_rows(self) -> Select:
        return select(*(expr.label(name) for name, expr in self.columns.items())).select_from(
            self.entity
        )


# ── Column maps ─────────────────────────────────────────────────────────


def _columns(entity: Any, *names: str) -> dict[str, ColumnElement]:
    return {name: getattr(entity, name) for name in names}


def _asset_columns() -> dict[str, ColumnElement]:
    return _columns(
        ArchiveAsset,
        "id",
        "name",
        "title",
        "filepath",
        "metadata_source",
        "is_media_file",
        "asset_type",
        "file_format",
        "file_size_bytes",
        "duration",
        "original_date",
        "created_date",
        "has_oral_translation",
        "oral_translation_languages",
        "transcript_languages",
        "transcripts_available",
        "has_timestamped_transcript",
        "session_id",
        "cataloging_status",
        "needs_detailed_review",
        "remove_file",
        "safe_to_delete_from_gdrive",
        "created_at",
    )


def _event_columns() -> dict[str, ColumnElement]:
    parent = aliased(Event)
    child = aliased(Event)
    columns = _columns(
        Event,
        "id",
        "event_id",
        "event_name",
        "event_date_start",
        "event_date_end",
        "event_type",
        "parent_event_id",
        "location_id",
        "organizer_id",
        "cataloging_status",
        "harvest_source",
        "additional_metadata",
        "created_at",
    )
    metadata = Event.additional_metadata
    columns.update(
        hosting_center=metadata["hosting_center"].as_string(),
        country_raw=metadata["country_raw"].as_string(),
        location_raw=metadata["location_raw"].as_string(),
        parent_event_name=select(parent.event_name)
        .where(parent.id == Event.parent_event_id)
        .scalar_subquery(),
        location_name=select(Location.name).where(Location.id == Event.location_id).scalar_subquery(),
        organizer_name=select(Organization.name)
        .where(Organization.id == Event.organizer_id)
        .scalar_subquery(),
        session_count=select(func.count(EventSession.id))
        .where(EventSession.event_id == Event.id)
        .scalar_subquery(),
        asset_count=select(func.count(ArchiveAsset.id))
        .join(EventSession, ArchiveAsset.session_id == EventSession.id)
        .where(EventSession.event_id == Event.id)
        .scalar_subquery(),
        child_event_count=select(func.count(child.id))
        .where(child.parent_event_id == Event.id)
        .scalar_subquery(),
    )
    return columns


def _session_columns() -> dict[str, ColumnElement]:
    columns = _columns(
        EventSession,
        "id",
        "session_id",
        "event_id",
        "session_name",
        "session_date",
        "session_time",
        "sequence_in_event",
        "topic",
        "category",
        "asset_count",
        "has_assets",
        "cataloging_status",
        "created_at",
    )
    columns["event_name"] = (
        select(Event.event_name).where(Event.id == EventSession.event_id).scalar_subquery()
    )
    return columns


def _org_primary_address(column: ColumnElement) -> ColumnElement:
    """Value from the primary address of the organization's primary location."""
    return (
        select(column)
        .select_from(OrganizationLocation)
        .join(
            LocationAddress,
            and_(
                LocationAddress.location_id == OrganizationLocation.location_id,
                LocationAddress.is_primary.is_(True),
            ),
        )
        .join(Address, Address.id == LocationAddress.address_id)
        .where(
            OrganizationLocation.organization_id == Organization.id,
            OrganizationLocation.is_primary.is_(True),
        )
        .limit(1)
        .scalar_subquery()
    )


def _organization_columns() -> dict[str, ColumnElement]:
    columns = _columns(Organization, "id", "code", "name", "org_type", "website", "created_at")
    columns.update(
        primary_city=_org_primary_address(Address.city),
        primary_state_province=_org_primary_address(Address.state_province),
        primary_country=_org_primary_address(Address.country),
    )
    return columns


RECORD_TABLES: dict[str, RecordTable] = {
    "assets": RecordTable(ArchiveAsset, _asset_columns()),
    "events": RecordTable(Event, _event_columns()),
    "sessions": RecordTable(EventSession, _session_columns()),
    "locations": RecordTable(
        Location,
        _columns(Location, "id", "code", "name", "location_type", "city", "country", "created_at"),
    ),
    "organizations": RecordTable(Organization, _organization_columns()),
    "addresses": RecordTable(
        Address,
        _columns(
            Address,
            "id",
            "label",
            "full_address",
            "street",
            "city",
            "state_province",
            "postal_code",
            "country",
            "created_at",
            "deleted_at",
        ),
    ),
}


def get_record_table(record_type: str) -> RecordTable:
    try:
        return RECORD_TABLES[record_type]
    except KeyError:
        raise UnknownFieldError(record_type) from None


# ── Predicate compilation ───────────────────────────────────────────────


def _as_text(expr: ColumnElement) -> ColumnElement:
    if isinstance(expr.type, String):
        return expr
    return cast(expr, String)


def _bound(expr: ColumnElement, value: Any) -> Any:
    # Whole-day datetimes compared against DATE columns
    if isinstance(expr.type, Date) and isinstance(value, datetime):
        return value.date()
    return value


def _compile_condition(table: RecordTable, cond: Condition) -> ColumnElement:
    expr = table.column(cond.field)
    op = cond.op
    if op is Op.EQ:
        return expr == cond.value
    if op is Op.CONTAINS:
        return _as_text(expr).icontains(str(cond.value), autoescape=True)
    if op is Op.GE:
        return expr >= _bound(expr, cond.value)
    if op is Op.LE:
        return expr <= _bound(expr, cond.value)
    if op is Op.IN:
        return expr.in_(list(cond.value))
    if op is Op.IS_NULL:
        return expr.is_(None)
    if op is Op.HAS:
        # JSON array text contains the JSON-encoded element
        return cast(expr, String).contains(dump_json(cond.value), autoescape=True)
    raise ValueError(f"Unsupported operator: {op}")


def compile_predicate(table: RecordTable, pred: Predicate | None) -> ColumnElement:
    """Compile a predicate tree into one SQL boolean expression."""
    if pred is None:
        return true()
    if isinstance(pred, Condition):
        return _compile_condition(table, pred)
    children = [compile_predicate(table, child) for child in pred.children]
    if isinstance(pred, AllOf):
        return and_(*children)
    if isinstance(pred, AnyOf):
        return or_(*children)
    raise TypeError(f"Not a predicate: {pred!r}")


def apply_where(query: Select, table: RecordTable, pred: Predicate | None) -> Select:
    if pred is None:
        return query
    return query.where(compile_predicate(table, pred))


# ── Sort / page ─────────────────────────────────────────────────────────


def apply_sort(query: Select, table: RecordTable, sort: SortSpec) -> Select:
    """ORDER BY the sort field NULLs last, then the primary key."""
    expr = table.column(sort.field)
    pk = table.column(table.primary_key)
    if sort.order is SortOrder.ASC:
        return query.order_by(expr.asc().nulls_last(), pk.asc())
    return query.order_by(expr.desc().nulls_last(), pk.desc())


def apply_page(query: Select, page: PageSpec | None) -> Select:
    if page is None:
        return query
    return query.offset(page.offset).limit(page.limit)


def count_query(table: RecordTable, pred: Predicate | None) -> Select:
    query = select(func.count()).select_from(table.entity)
    return apply_where(query, table, pred)


def rows_query(
    table: RecordTable, pred: Predicate | None, sort: SortSpec, page: PageSpec | None = None
) -> Select:
    query = apply_where(table.select_rows(), table, pred)
    query = apply_sort(query, table, sort)
    return apply_page(query, page)


def distinct_query(
    table: RecordTable,
    field: str,
    pred: Predicate | None = None,
    label_field: str | None = None,
) -> Select:
    value = table.column(field)
    exprs = [value.label("value")]
    if label_field is not None:
        exprs.append(table.column(label_field).label("label"))
    query = select(*exprs).select_from(table.entity).where(value.is_not(None)).distinct()
    return apply_where(query, table, pred)
