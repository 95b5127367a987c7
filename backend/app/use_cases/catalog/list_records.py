"""ListRecordsUseCase: filtered, sorted, paginated listing of one record type.

This use case wires the listing pipeline together:
  1. Normalize the raw request parameters into a ``FilterSpec``
  2. Build one predicate from it (AND-ed with the record type's scope)
  3. Resolve the sort and the page
  4. Count, fetch the page, and compute facets through the record store

Malformed parameters never fail the request.  Only an unknown record type
(EntityNotFoundError) or a store failure surfaces.

The use case depends ONLY on domain ports, never on SQLAlchemy,
FastAPI, or any other infrastructure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from app.domain.catalog.facets import count_facets
from app.domain.catalog.models import Listing, ResultPage
from app.domain.catalog.normalizer import RawParams, normalize_filters
from app.domain.catalog.paging import page_spec
from app.domain.catalog.predicate_builder import build_predicate
from app.domain.catalog.registry import get_record_schema
from app.domain.catalog.sorting import resolve_schema_sort
from app.domain.common.predicates import all_of
from app.domain.common.uow import UnitOfWork

logger = logging.getLogger(__name__)


# ── Query (input) ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ListRecordsQuery:
    """Immutable value object describing what the caller wants to list."""

    record_type: str
    params: RawParams = field(default_factory=dict)
    page: Any = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    per_page: int = 50
    today: Optional[date] = None  # anchor for relative date presets


# ── Result (output) ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class ListRecordsResult:
    """What the use case returns to the caller."""

    listing: Listing


# ── Use Case ────────────────────────────────────────────────────────────


class ListRecordsUseCase:
    """Produce one list page plus facets for a record type."""

    def execute(self, uow: UnitOfWork, query: ListRecordsQuery) -> ListRecordsResult:
        schema = get_record_schema(query.record_type)
        spec = normalize_filters(schema, query.params, today=query.today)
        where = all_of(schema.scope, build_predicate(schema, spec))
        sort = resolve_schema_sort(schema, query.sort_by, query.sort_order)
        page = page_spec(query.page, query.per_page)

        with uow:
            total = uow.records.count(schema.name, where)
            # Pages past the end are empty without a row query
            rows = (
                uow.records.fetch(schema.name, where, sort.spec, page)
                if page.offset < total
                else []
            )
            facets = count_facets(uow.records, schema, spec)

        logger.info(
            "Listed %s: page %d, %d of %d row(s), %d active filter(s)",
            schema.name,
            page.page,
            len(rows),
            total,
            len(spec),
        )
        return ListRecordsResult(
            listing=Listing(
                record_type=schema.name,
                page=ResultPage(
                    items=tuple(rows), total=total, page=page.page, per_page=page.per_page
                ),
                sort_key=sort.key,
                sort_order=sort.order.value,
                filters=spec,
                facets=facets,
            )
        )
