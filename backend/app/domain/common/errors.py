"""Domain error hierarchy.

Use cases raise these; routers translate them into HTTP responses.
Persistence errors (SQLAlchemy, driver) are not wrapped and propagate
unchanged.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by domain code and use cases."""


class EntityNotFoundError(DomainError):
    """A requested entity (or record type) does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


__all__ = ["DomainError", "EntityNotFoundError"]
