"""Predicate builder: normalized filters to one storage-neutral predicate.

Each ``FilterField`` of a schema contributes one optional step; the
steps are folded into a conjunction.  A field whose value produces no
predicate simply drops out, and a spec with no active filters yields
``None`` (match everything).
"""

from __future__ import annotations

from datetime import datetime, time

from app.domain.common.predicates import (
    Predicate,
    all_of,
    any_of,
    contains,
    eq,
    ge,
    has,
    in_,
    is_null,
    le,
)
from app.domain.common.query import DateRange, FilterSpec, FilterValue

from .fields import FilterField, FilterKind, RecordSchema


def _exact(field: FilterField, value: str) -> Predicate | None:
    if field.value_predicates is not None:
        return field.value_predicates.get(value)
    if field.null_token is not None and value == field.null_token:
        return is_null(field.column)
    return eq(field.column, value)


def _boolean(field: FilterField, value: bool) -> Predicate:
    if value or not field.null_as_false:
        return eq(field.column, value)
    return any_of(eq(field.column, False), is_null(field.column))


def _multi_select(field: FilterField, values: frozenset) -> Predicate | None:
    selected = set(values)
    null_pred = None
    if field.null_token is not None and field.null_token in selected:
        selected.discard(field.null_token)
        null_pred = is_null(field.column)

    if not selected:
        return null_pred
    if field.array:
        value_pred = any_of(*(has(field.column, v) for v in sorted(selected)))
    elif len(selected) == 1:
        value_pred = eq(field.column, next(iter(selected)))
    else:
        value_pred = in_(field.column, selected)
    return any_of(value_pred, null_pred)


def _text(field: FilterField, value: str) -> Predicate | None:
    return any_of(*(contains(column, value) for column in field.columns))


def _date_range(field: FilterField, window: DateRange) -> Predicate | None:
    lower = upper = None
    if window.start is not None:
        lower = ge(field.column, datetime.combine(window.start, time.min))
    if window.end is not None:
        upper = le(field.column, datetime.combine(window.end, time.max))
    return all_of(lower, upper)


_STEPS = {
    FilterKind.EXACT: _exact,
    FilterKind.BOOLEAN: _boolean,
    FilterKind.MULTI_SELECT: _multi_select,
    FilterKind.TEXT: _text,
    FilterKind.FUZZY_DATE: _text,
    FilterKind.DATE_RANGE: _date_range,
}


def build_field_predicate(field: FilterField, value: FilterValue | None) -> Predicate | None:
    """Predicate for one field, or None when the value filters nothing."""
    if value is None:
        return None
    return _STEPS[field.kind](field, value)


def build_predicate(schema: RecordSchema, spec: FilterSpec) -> Predicate | None:
    """Conjunction of every active field predicate of *spec*."""
    steps = [build_field_predicate(field, spec.get(field.name)) for field in schema.filters]
    return all_of(*steps)


__all__ = ["build_field_predicate", "build_predicate"]
