"""Declarative description of what a record type can be filtered, sorted
and faceted by.

A ``RecordSchema`` is pure configuration: the normalizer, predicate
builder, sort resolver and facet counter are all driven by it, so adding
a filter to a list view means adding one ``FilterField`` here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from app.domain.common.predicates import Predicate
from app.domain.common.query import SortOrder, SortSpec


class FilterKind(str, Enum):
    EXACT = "exact"
    BOOLEAN = "boolean"
    MULTI_SELECT = "multi_select"
    TEXT = "text"
    FUZZY_DATE = "fuzzy_date"
    DATE_RANGE = "date_range"


@dataclass(frozen=True)
class FilterField:
    """One filterable attribute of a record type.

    ``name`` is the request parameter name (date ranges read
    ``<name>_from`` / ``<name>_to``).  ``columns`` are the store fields the
    filter applies to; text and fuzzy-date filters OR across all of them,
    every other kind uses the first.

    ``null_as_false`` only matters for boolean fields: when set, ``false``
    also matches rows where the column was never filled in.
    """

    name: str
    kind: FilterKind
    columns: tuple[str, ...]
    null_as_false: bool = False
    null_token: str | None = None
    array: bool = False
    choices: tuple[str, ...] | None = None
    value_predicates: Mapping[str, Predicate] | None = None

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError(f"filter {self.name!r} needs at least one column")

    @property
    def column(self) -> str:
        return self.columns[0]

    @property
    def params(self) -> tuple[str, ...]:
        """Request parameter names this field reads."""
        if self.kind is FilterKind.DATE_RANGE:
            return (f"{self.name}_from", f"{self.name}_to")
        return (self.name,)


@dataclass(frozen=True)
class FacetTally:
    """A summary badge: number of rows matching *where* (None = all rows)."""

    label: str
    where: Predicate | None = None


@dataclass(frozen=True)
class FacetEnumeration:
    """Distinct values of a field, used to populate a filter dropdown.

    ``label_field`` pairs each value with a display label (e.g. a foreign
    key with the referenced row's name).  ``flatten`` expands list-valued
    fields into their elements.
    """

    name: str
    field: str
    label_field: str | None = None
    flatten: bool = False


@dataclass(frozen=True)
class RecordSchema:
    """Filter / sort / facet configuration for one record type."""

    name: str
    filters: tuple[FilterField, ...]
    sort_fields: Mapping[str, str]
    default_sort: str
    tallies: tuple[FacetTally, ...] = ()
    enumerations: tuple[FacetEnumeration, ...] = ()
    scope: Predicate | None = None
    description: str = ""
    _by_name: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.default_sort not in self.sort_fields:
            raise ValueError(
                f"{self.name}: default sort {self.default_sort!r} is not an allowed sort key"
            )
        names = [f.name for f in self.filters]
        if len(names) != len(set(names)):
            raise ValueError(f"{self.name}: duplicate filter names in {names}")
        self._by_name.update({f.name: f for f in self.filters})

    def filter(self, name: str) -> FilterField | None:
        return self._by_name.get(name)

    @property
    def default_sort_spec(self) -> SortSpec:
        return SortSpec(field=self.sort_fields[self.default_sort], order=SortOrder.DESC)


__all__ = [
    "FilterKind",
    "FilterField",
    "FacetTally",
    "FacetEnumeration",
    "RecordSchema",
]
