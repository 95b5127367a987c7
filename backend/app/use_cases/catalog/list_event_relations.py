"""Use cases reading the rows hanging off one event.

Both raise ``EntityNotFoundError`` when the parent event does not exist,
so an empty list always means "exists, but has none".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.domain.catalog.models import Record
from app.domain.common.errors import EntityNotFoundError
from app.domain.common.predicates import eq
from app.domain.common.query import SortOrder, SortSpec
from app.domain.common.uow import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventRelationsQuery:
    event_id: str


@dataclass(frozen=True)
class EventRelationsResult:
    event_id: str
    items: tuple[Record, ...]


class _EventRelationsUseCase:
    record_type: str
    foreign_key: str
    sort: SortSpec

    def execute(self, uow: UnitOfWork, query: EventRelationsQuery) -> EventRelationsResult:
        with uow:
            if not uow.records.exists("events", query.event_id):
                raise EntityNotFoundError("Event", query.event_id)
            rows = uow.records.fetch(
                self.record_type, eq(self.foreign_key, query.event_id), self.sort
            )
        logger.debug("Event %s has %d %s", query.event_id, len(rows), self.record_type)
        return EventRelationsResult(event_id=query.event_id, items=tuple(rows))


class ListChildEventsUseCase(_EventRelationsUseCase):
    """Direct sub-events of an event, earliest first."""

    record_type = "events"
    foreign_key = "parent_event_id"
    sort = SortSpec(field="event_date_start", order=SortOrder.ASC)


class ListEventSessionsUseCase(_EventRelationsUseCase):
    """Sessions of an event in running order."""

    record_type = "sessions"
    foreign_key = "event_id"
    sort = SortSpec(field="sequence_in_event", order=SortOrder.ASC)
