"""Ports (abstract interfaces) for the catalog domain.

The domain only describes *what* it reads: predicates, sort specs and
page specs.  Concrete stores in ``app.infra`` translate them into SQL or
evaluate them over in-memory rows.
"""

from __future__ import annotations

import abc
from typing import Optional

from app.domain.common.predicates import Predicate, eq
from app.domain.common.query import PageSpec, SortSpec

from .models import FacetOption, Record


class RecordStore(abc.ABC):
    """Read-only query interface over every listable record type."""

    @abc.abstractmethod
    def count(self, record_type: str, where: Optional[Predicate]) -> int:
        """Number of rows of *record_type* matching *where* (None = all)."""
        ...

    @abc.abstractmethod
    def fetch(
        self,
        record_type: str,
        where: Optional[Predicate],
        sort: SortSpec,
        page: Optional[PageSpec] = None,
    ) -> list[Record]:
        """Matching rows in *sort* order, bounded by *page* when given.

        Rows are ordered NULLs-last with the primary key as tiebreaker.
        """
        ...

    @abc.abstractmethod
    def distinct_values(
        self,
        record_type: str,
        field: str,
        *,
        where: Optional[Predicate] = None,
        label_field: Optional[str] = None,
        flatten: bool = False,
    ) -> list[FacetOption]:
        """Distinct non-empty values of *field*, sorted by label."""
        ...

    def exists(self, record_type: str, record_id: str, *, id_field: str = "id") -> bool:
        return self.count(record_type, eq(id_field, record_id)) > 0

__all__ = ["RecordStore"]
