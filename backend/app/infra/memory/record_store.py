"""In-memory RecordStore over lists of dict rows.

Evaluates the predicate tree in Python with the same semantics the SQL
store compiles to: case-insensitive substring over the textual rendering,
NULL never satisfying a comparison, NULLs sorted last.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from app.domain.catalog.facets import build_options
from app.domain.catalog.models import FacetOption, Record
from app.domain.catalog.ports import RecordStore
from app.domain.common.predicates import AllOf, AnyOf, Condition, Op, Predicate
from app.domain.common.query import PageSpec, SortOrder, SortSpec
from app.infra.serialization import dump_json


def _as_text(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return dump_json(value)
    return str(value)


def _align(value: Any, bound: Any) -> tuple[Any, Any]:
    """Make a date and a datetime comparable by dropping the time part."""
    if isinstance(bound, datetime) and isinstance(value, date) and not isinstance(value, datetime):
        return value, bound.date()
    if isinstance(value, datetime) and isinstance(bound, date) and not isinstance(bound, datetime):
        return value.date(), bound
    return value, bound


def _matches_condition(row: Record, cond: Condition) -> bool:
    value = row.get(cond.field)
    op = cond.op
    if op is Op.IS_NULL:
        return value is None
    if value is None:
        return False
    if op is Op.EQ:
        return value == cond.value
    if op is Op.CONTAINS:
        return str(cond.value).casefold() in _as_text(value).casefold()
    if op is Op.GE:
        left, right = _align(value, cond.value)
        return left >= right
    if op is Op.LE:
        left, right = _align(value, cond.value)
        return left <= right
    if op is Op.IN:
        return value in cond.value
    if op is Op.HAS:
        return isinstance(value, (list, tuple)) and cond.value in value
    raise ValueError(f"Unsupported operator: {op}")


def matches(row: Record, pred: Optional[Predicate]) -> bool:
    """True when *row* satisfies *pred* (None matches every row)."""
    if pred is None:
        return True
    if isinstance(pred, Condition):
        return _matches_condition(row, pred)
    if isinstance(pred, AllOf):
        return all(matches(row, child) for child in pred.children)
    if isinstance(pred, AnyOf):
        return any(matches(row, child) for child in pred.children)
    raise TypeError(f"Not a predicate: {pred!r}")


def sort_rows(rows: list[Record], sort: SortSpec, primary_key: str = "id") -> list[Record]:
    """Order by the sort field with NULLs last, ties broken by primary key."""
    reverse = sort.order is SortOrder.DESC
    present = [r for r in rows if r.get(sort.field) is not None]
    missing = [r for r in rows if r.get(sort.field) is None]
    present.sort(key=lambda r: (r[sort.field], r.get(primary_key)), reverse=reverse)
    missing.sort(key=lambda r: r.get(primary_key), reverse=reverse)
    return present + missing


class InMemoryRecordStore(RecordStore):
    """RecordStore backed by ``{record_type: [row, ...]}``."""

    def __init__(self, rows: Optional[Mapping[str, Iterable[Record]]] = None) -> None:
        self._rows: dict[str, list[dict]] = {}
        for record_type, records in (rows or {}).items():
            self.add(record_type, *records)

    def add(self, record_type: str, *records: Record) -> None:
        self._rows.setdefault(record_type, []).extend(dict(r) for r in records)

    def _matching(self, record_type: str, where: Optional[Predicate]) -> list[dict]:
        return [row for row in self._rows.get(record_type, []) if matches(row, where)]

    def count(self, record_type: str, where: Optional[Predicate]) -> int:
        return len(self._matching(record_type, where))

    def fetch(
        self,
        record_type: str,
        where: Optional[Predicate],
        sort: SortSpec,
        page: Optional[PageSpec] = None,
    ) -> list[Record]:
        rows = sort_rows(self._matching(record_type, where), sort)
        if page is not None:
            rows = rows[page.offset : page.offset + page.limit]
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
        pairs = (
            (row.get(field), row.get(label_field) if label_field else None)
            for row in self._matching(record_type, where)
        )
        return build_options(pairs, flatten=flatten)
