"""Sort resolver: requested sort key and direction to a safe ``SortSpec``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from app.domain.common.query import SortOrder, SortSpec

from .fields import RecordSchema


@dataclass(frozen=True)
class ResolvedSort:
    """The allow-listed sort key that was applied and its store-level spec."""

    key: str
    spec: SortSpec

    @property
    def order(self) -> SortOrder:
        return self.spec.order


def parse_sort_order(raw: Optional[str]) -> SortOrder:
    """``"asc"`` sorts ascending; anything else (including None) descending."""
    if raw is not None and raw.strip().lower() == "asc":
        return SortOrder.ASC
    return SortOrder.DESC


def resolve_sort(
    requested_key: Optional[str],
    requested_order: Optional[str],
    allowed: Mapping[str, str],
    default_key: str,
) -> ResolvedSort:
    """Map a requested sort onto the allow-list.

    Unknown or missing keys fall back to *default_key*.  The direction is
    resolved independently of the key.
    """
    key = requested_key.strip() if requested_key else ""
    if key not in allowed:
        key = default_key
    return ResolvedSort(key=key, spec=SortSpec(field=allowed[key], order=parse_sort_order(requested_order)))


def resolve_schema_sort(
    schema: RecordSchema, requested_key: Optional[str], requested_order: Optional[str]
) -> ResolvedSort:
    return resolve_sort(requested_key, requested_order, schema.sort_fields, schema.default_sort)


__all__ = ["ResolvedSort", "parse_sort_order", "resolve_sort", "resolve_schema_sort"]
