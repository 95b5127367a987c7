"""Filter normalizer: raw request parameters to a typed ``FilterSpec``.

Input is a plain mapping of parameter name to ``None``, one string, or a
sequence of strings (repeated query parameters).  Nothing here raises on
bad input: a value that cannot be understood is treated as absent, so a
list page always renders.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Union

from dateutil.relativedelta import relativedelta

from app.domain.common.query import DateRange, FilterSpec, FilterValue

from .fields import FilterField, FilterKind, RecordSchema

logger = logging.getLogger(__name__)

RawValue = Union[None, str, bool, date, Iterable[str]]
RawParams = Mapping[str, RawValue]

_FUZZY_DATE_RE = re.compile(r"^\d[\d\-: ]*$")

_DATE_PRESETS = {
    "6m": relativedelta(months=6),
    "1y": relativedelta(years=1),
    "2y": relativedelta(years=2),
    "3y": relativedelta(years=3),
    "5y": relativedelta(years=5),
}


# ---------------------------------------------------------------------------
# Scalar coercions
# ---------------------------------------------------------------------------


def coerce_values(raw: RawValue) -> frozenset[str]:
    """Collapse a scalar-or-array parameter into a set of clean strings.

    Every string is split on commas, entries are trimmed and empty ones
    dropped.  ``None`` yields the empty set.
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items: Iterable[Any] = (raw,)
    else:
        items = raw
    values: set[str] = set()
    for item in items:
        if item is None:
            continue
        for part in str(item).split(","):
            part = part.strip()
            if part:
                values.add(part)
    return frozenset(values)


def first_value(raw: RawValue) -> Optional[str]:
    """First non-empty trimmed string of a scalar-or-array parameter."""
    if raw is None:
        return None
    if isinstance(raw, str):
        items: Iterable[Any] = (raw,)
    else:
        items = raw
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            return text
    return None


def parse_tristate(raw: RawValue) -> Optional[bool]:
    """``"true"`` → True, ``"false"`` → False, anything else → None."""
    if isinstance(raw, bool):
        return raw
    value = first_value(raw)
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def parse_fuzzy_date(raw: RawValue) -> Optional[str]:
    """Pass a year / year-month / full-date fragment through verbatim."""
    value = first_value(raw)
    if value is None or not _FUZZY_DATE_RE.match(value):
        return None
    return value


def parse_date_bound(raw: RawValue, *, today: date | None = None) -> Optional[date]:
    """Parse one date-range bound.

    Accepts ISO ``YYYY-MM-DD`` or a relative preset (6m, 1y, 2y, 3y, 5y
    before *today*).  Anything else is dropped.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    value = first_value(raw)
    if value is None:
        return None

    delta = _DATE_PRESETS.get(value.lower())
    if delta is not None:
        return (today or date.today()) - delta
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        logger.debug("Dropping unparseable date bound %r", value)
        return None


# ---------------------------------------------------------------------------
# Per-field normalization
# ---------------------------------------------------------------------------


def normalize_field(
    field: FilterField, params: RawParams, *, today: date | None = None
) -> Optional[FilterValue]:
    """Normalize the parameter(s) of one field; None means "no filter"."""
    kind = field.kind

    if kind is FilterKind.DATE_RANGE:
        own = params.get(field.name)
        if isinstance(own, DateRange):
            start, end = own.start, own.end
        else:
            from_param, to_param = field.params
            start = parse_date_bound(params.get(from_param), today=today)
            end = parse_date_bound(params.get(to_param), today=today)
        window = DateRange(start=start, end=end)
        return None if window.is_empty() else window

    raw = params.get(field.name)

    if kind is FilterKind.MULTI_SELECT:
        values = coerce_values(raw)
        return values or None

    if kind is FilterKind.BOOLEAN:
        return parse_tristate(raw)

    if kind is FilterKind.FUZZY_DATE:
        return parse_fuzzy_date(raw)

    value = first_value(raw)
    if value is None:
        return None
    if kind is FilterKind.EXACT and field.choices is not None and value not in field.choices:
        return None
    return value


def normalize_filters(
    schema: RecordSchema, params: RawParams, *, today: date | None = None
) -> FilterSpec:
    """Build the ``FilterSpec`` for *schema* from raw request parameters.

    Parameters that do not belong to any filter of the schema (page,
    sort, unknown names) are ignored.  Passing a ``FilterSpec`` or its
    ``to_params()`` output back in returns an equal spec.
    """
    if isinstance(params, FilterSpec):
        params = params.values

    values: dict[str, FilterValue] = {}
    for field in schema.filters:
        value = normalize_field(field, params, today=today)
        if value is not None:
            values[field.name] = value
    return FilterSpec(values)


__all__ = [
    "RawValue",
    "RawParams",
    "coerce_values",
    "first_value",
    "parse_tristate",
    "parse_fuzzy_date",
    "parse_date_bound",
    "normalize_field",
    "normalize_filters",
]
