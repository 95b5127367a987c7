"""Dependency injection bootstrap: the single place that binds ports to adapters.

Every factory function here can be used as a FastAPI ``Depends()`` target.
Routers never import concrete implementations directly; they depend on
the abstractions returned by these factories.

Example usage in a router::

    from app.wiring.bootstrap import get_uow, get_list_records_use_case

    @router.get("/assets")
    async def list_assets(
        request: Request,
        uow: SqlUnitOfWork = Depends(get_uow),
        use_case: ListRecordsUseCase = Depends(get_list_records_use_case),
    ):
        result = use_case.execute(uow, query)
"""

from __future__ import annotations

from typing import Iterator

from app.config import settings
from app.database import SessionLocal
from app.infra.db.uow import SqlUnitOfWork
from app.use_cases.catalog.list_event_relations import (
    ListChildEventsUseCase,
    ListEventSessionsUseCase,
)
from app.use_cases.catalog.list_records import ListRecordsUseCase


# ── Unit of Work ─────────────────────────────────────────────────────────


def get_uow() -> Iterator[SqlUnitOfWork]:
    """Yield a SqlUnitOfWork bound to SessionLocal.

    Designed for FastAPI Depends()::

        uow: SqlUnitOfWork = Depends(get_uow)
    """
    uow = SqlUnitOfWork(SessionLocal)
    yield uow


# ── Configuration ────────────────────────────────────────────────────────


def get_listing_page_size() -> int:
    """Rows per list page (LISTING_PAGE_SIZE)."""
    return settings.listing_page_size


# ── Use Cases ────────────────────────────────────────────────────────────


def get_list_records_use_case() -> ListRecordsUseCase:
    return ListRecordsUseCase()


def get_list_child_events_use_case() -> ListChildEventsUseCase:
    return ListChildEventsUseCase()


def get_list_event_sessions_use_case() -> ListEventSessionsUseCase:
    return ListEventSessionsUseCase()
