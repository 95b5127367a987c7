"""Facet counter: summary tallies and dropdown enumerations."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from app.domain.common.predicates import all_of
from app.domain.common.query import FilterSpec

from .fields import RecordSchema
from .models import FacetCounts, FacetOption
from .ports import RecordStore

logger = logging.getLogger(__name__)


def build_options(
    pairs: Iterable[tuple[Any, Any]], *, flatten: bool = False
) -> list[FacetOption]:
    """Turn raw (value, label) pairs from a store into dropdown options.

    Empty values are skipped, values are de-duplicated (first label wins)
    and the result is sorted by label.  With *flatten*, list values
    contribute each of their elements.
    """
    seen: dict[str, FacetOption] = {}
    for value, label in pairs:
        items = value if flatten and isinstance(value, (list, tuple)) else (value,)
        for item in items:
            if item is None:
                continue
            text = str(item)
            if not text.strip() or text in seen:
                continue
            shown = text if label is None or flatten else str(label)
            seen[text] = FacetOption(value=text, label=shown)
    return sorted(seen.values(), key=lambda opt: (opt.label, opt.value))


def count_tallies(
    store: RecordStore, schema: RecordSchema, spec: FilterSpec
) -> Optional[dict[str, int]]:
    """Badge counts for the unfiltered view; None once any filter is active."""
    if not spec.is_empty():
        return None
    return {
        tally.label: store.count(schema.name, all_of(schema.scope, tally.where))
        for tally in schema.tallies
    }


def list_enumerations(
    store: RecordStore, schema: RecordSchema
) -> dict[str, tuple[FacetOption, ...]]:
    """Dropdown options for every enumeration of *schema*.

    Independent of the active filters: a user can always switch a filter
    to another value.
    """
    options: dict[str, tuple[FacetOption, ...]] = {}
    for enum in schema.enumerations:
        options[enum.name] = tuple(
            store.distinct_values(
                schema.name,
                enum.field,
                where=schema.scope,
                label_field=enum.label_field,
                flatten=enum.flatten,
            )
        )
    return options


def count_facets(store: RecordStore, schema: RecordSchema, spec: FilterSpec) -> FacetCounts:
    tallies = count_tallies(store, schema, spec)
    if tallies is None:
        logger.debug("%s: %d filter(s) active, tallies suppressed", schema.name, len(spec))
    return FacetCounts(tallies=tallies, options=list_enumerations(store, schema))


__all__ = ["build_options", "count_tallies", "list_enumerations", "count_facets"]
