"""Filter, sort, and pagination specifications for domain queries.

These types express query intent in domain terms, independent of
any persistence mechanism.  Adapters translate them into SQL WHERE
clauses, in-memory predicates, or whatever the infra layer requires.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ---------------------------------------------------------------------------
# Filter values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window; either bound may be open."""

    start: date | None = None
    end: date | None = None

    def is_empty(self) -> bool:
        return self.start is None and self.end is None


# str for exact / text / fuzzy-date fields, bool for tri-state fields,
# frozenset for multi-select fields, DateRange for date windows.
FilterValue = Union[str, bool, frozenset, DateRange]


@dataclass(frozen=True)
class FilterSpec:
    """Active filter values keyed by filter name.

    Immutable: a spec is built once per request by the normalizer and
    only read afterwards.
    """

    values: Mapping[str, FilterValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def is_empty(self) -> bool:
        return not self.values

    def to_params(self) -> dict[str, str]:
        """Render the spec back into canonical request parameters.

        Multi-select sets are emitted sorted and comma-joined, booleans as
        ``"true"``/``"false"``, and date windows as ``<name>_from`` /
        ``<name>_to`` ISO dates.  Feeding the result back through the
        normalizer reproduces this spec.
        """
        params: dict[str, str] = {}
        for name in sorted(self.values):
            value = self.values[name]
            if isinstance(value, bool):
                params[name] = "true" if value else "false"
            elif isinstance(value, frozenset):
                params[name] = ",".join(sorted(value))
            elif isinstance(value, DateRange):
                if value.start is not None:
                    params[f"{name}_from"] = value.start.isoformat()
                if value.end is not None:
                    params[f"{name}_to"] = value.end.isoformat()
            else:
                params[name] = str(value)
        return params


# ---------------------------------------------------------------------------
# Sort / page
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SortSpec:
    """Sort directive for query results."""

    field: str = "created_at"
    order: SortOrder = SortOrder.DESC


@dataclass(frozen=True)
class PageSpec:
    """Pagination parameters with validation."""

    page: int = 1
    per_page: int = 50

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.per_page < 1:
            raise ValueError(f"per_page must be >= 1, got {self.per_page}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "SortOrder",
    "DateRange",
    "FilterValue",
    "FilterSpec",
    "SortSpec",
    "PageSpec",
]
