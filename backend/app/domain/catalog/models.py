"""Result value objects returned by the catalog use cases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from app.domain.common.query import FilterSpec

from .paging import page_window, total_pages

# A listed row: store field name -> value.
Record = Mapping[str, Any]


@dataclass(frozen=True)
class ResultPage:
    """Paginated result set with metadata.

    Centralises pagination math so stores and use cases hand around a
    single aggregate instead of ``(list, int)`` tuples.
    """

    items: tuple[Record, ...]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.per_page)

    @property
    def page_window(self) -> list[Optional[int]]:
        return page_window(self.page, self.total_pages)


@dataclass(frozen=True)
class FacetOption:
    """One dropdown entry: the filter value and what to display for it."""

    value: str
    label: str


@dataclass(frozen=True)
class FacetCounts:
    """Summary tallies (None while any filter is active) and dropdown options."""

    tallies: Optional[Mapping[str, int]]
    options: Mapping[str, tuple[FacetOption, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class Listing:
    """Everything a list view renders for one request."""

    record_type: str
    page: ResultPage
    sort_key: str
    sort_order: str
    filters: FilterSpec
    facets: FacetCounts


__all__ = ["Record", "ResultPage", "FacetOption", "FacetCounts", "Listing"]
