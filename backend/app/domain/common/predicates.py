"""Storage-neutral predicate tree.

A predicate is either a single ``Condition`` on one named field or an
``AllOf`` / ``AnyOf`` combination.  Record stores compile the tree into
their own query language (SQL WHERE clause, Python callable, ...).

``None`` stands for "no predicate" (match everything); the ``all_of`` and
``any_of`` helpers drop ``None`` children so callers can fold optional
pieces without guard clauses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class Op(str, Enum):
    EQ = "eq"
    CONTAINS = "contains"  # case-insensitive substring of the textual rendering
    GE = "ge"
    LE = "le"
    IN = "in"
    IS_NULL = "is_null"
    HAS = "has"  # list-valued field contains the element


@dataclass(frozen=True)
class Condition:
    """Comparison of one store field against a value."""

    field: str
    op: Op
    value: Any = None


@dataclass(frozen=True)
class AllOf:
    children: tuple[Predicate, ...]


@dataclass(frozen=True)
class AnyOf:
    children: tuple[Predicate, ...]


Predicate = Union[Condition, AllOf, AnyOf]


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def eq(field: str, value: Any) -> Condition:
    return Condition(field, Op.EQ, value)


def contains(field: str, text: str) -> Condition:
    return Condition(field, Op.CONTAINS, text)


def ge(field: str, value: Any) -> Condition:
    return Condition(field, Op.GE, value)


def le(field: str, value: Any) -> Condition:
    return Condition(field, Op.LE, value)


def in_(field: str, values: tuple | list | frozenset) -> Condition:
    return Condition(field, Op.IN, tuple(sorted(values)))


def is_null(field: str) -> Condition:
    return Condition(field, Op.IS_NULL)


def has(field: str, element: Any) -> Condition:
    return Condition(field, Op.HAS, element)


def _combine(kind: type, preds: tuple[Predicate | None, ...]) -> Predicate | None:
    flat: list[Predicate] = []
    for p in preds:
        if p is None:
            continue
        if isinstance(p, kind):
            flat.extend(p.children)
        else:
            flat.append(p)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return kind(tuple(flat))


def all_of(*preds: Predicate | None) -> Predicate | None:
    """Conjunction of the non-None predicates (None when nothing is left)."""
    return _combine(AllOf, preds)


def any_of(*preds: Predicate | None) -> Predicate | None:
    """Disjunction of the non-None predicates (None when nothing is left)."""
    return _combine(AnyOf, preds)


__all__ = [
    "Op",
    "Condition",
    "AllOf",
    "AnyOf",
    "Predicate",
    "eq",
    "contains",
    "ge",
    "le",
    "in_",
    "is_null",
    "has",
    "all_of",
    "any_of",
]
