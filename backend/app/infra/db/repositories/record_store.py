"""SQLAlchemy implementation of RecordStore."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.domain.catalog.facets import build_options
from app.domain.catalog.models import FacetOption, Record
from app.domain.catalog.ports import RecordStore
from app.domain.common.predicates import Predicate
from app.domain.common.query import PageSpec, SortSpec
from app.infra.query.record_query import (
    count_query,
    distinct_query,
    get_record_table,
    rows_query,
)

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """Run catalog listing queries on the Unit of Work's Session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def count(self, record_type: str, where: Optional[Predicate]) -> int:
        table = get_record_table(record_type)
        return self._session.execute(count_query(table, where)).scalar_one()

    def fetch(
        self,
        record_type: str,
        where: Optional[Predicate],
        sort: SortSpec,
        page: Optional[PageSpec] = None,
    ) -> list[Record]:
        table = get_record_table(record_type)
        query = rows_query(table, where, sort, page)
        rows = self._session.execute(query).mappings().all()
        logger.debug(
            "Fetched %d %s row(s) sorted by %s %s", len(rows), record_type, sort.field, sort.order.value
        )
        return [dict(row) for row in rows]

    def distinct_values(
        self,
        record_type: str,
        field: str,
        *,
        where: Optional[Predicate] = None,
        label_field: Optional[str] = None,
        flatten: bool = False,
    ) -> list[FacetOption]:
        table = get_record_table(record_type)
        rows = self._session.execute(distinct_query(table, field, where, label_field)).all()
        if label_field is None:
            pairs = ((row[0], None) for row in rows)
        else:
            pairs = ((row[0], row[1]) for row in rows)
        return build_options(pairs, flatten=flatten)
