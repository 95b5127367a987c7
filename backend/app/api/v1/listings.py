"""
API endpoints for catalog list views.

Every record type gets ``GET /<record_type>``: filter parameters come
straight from the query string and are normalized by the use case, so a
malformed value never produces a 422.  ``page``, ``sort_by`` and
``sort_order`` are read as plain strings for the same reason.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...domain.catalog.registry import RECORD_SCHEMAS
from ...domain.common.errors import EntityNotFoundError
from ...infra.db.uow import SqlUnitOfWork
from ...schemas.listing import EventRelationsResponse, ListingResponse
from ...use_cases.catalog.list_event_relations import (
    EventRelationsQuery,
    ListChildEventsUseCase,
    ListEventSessionsUseCase,
)
from ...use_cases.catalog.list_records import ListRecordsQuery, ListRecordsUseCase
from ...wiring.bootstrap import (
    get_list_child_events_use_case,
    get_list_event_sessions_use_case,
    get_list_records_use_case,
    get_listing_page_size,
    get_uow,
)
from .listing_params import RawQueryParams, raw_query_params

logger = logging.getLogger(__name__)
router = APIRouter()


def _listing_endpoint(record_type: str):
    async def list_records(
        page: Optional[str] = Query(None, description="Page number (1-indexed)"),
        sort_by: Optional[str] = Query(None, description="Sort key"),
        sort_order: Optional[str] = Query(None, description="Sort order: asc or desc"),
        params: RawQueryParams = Depends(raw_query_params),
        per_page: int = Depends(get_listing_page_size),
        uow: SqlUnitOfWork = Depends(get_uow),
        use_case: ListRecordsUseCase = Depends(get_list_records_use_case),
    ) -> ListingResponse:
        query = ListRecordsQuery(
            record_type=record_type,
            params=params,
            page=page,
            sort_by=sort_by,
            sort_order=sort_order,
            per_page=per_page,
        )
        result = await asyncio.to_thread(use_case.execute, uow, query)
        return ListingResponse.from_listing(result.listing)

    list_records.__name__ = f"list_{record_type}"
    return list_records


for _record_type, _schema in RECORD_SCHEMAS.items():
    router.add_api_route(
        f"/{_record_type}",
        _listing_endpoint(_record_type),
        methods=["GET"],
        response_model=ListingResponse,
        summary=f"List {_record_type}",
        description=_schema.description
        or f"Filtered, sorted and paginated {_record_type} with facets.",
        tags=["listings"],
    )


@router.get(
    "/events/{event_id}/children",
    response_model=EventRelationsResponse,
    tags=["listings"],
)
async def list_child_events(
    event_id: str,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: ListChildEventsUseCase = Depends(get_list_child_events_use_case),
):
    """Direct sub-events of an event, earliest start date first."""
    try:
        result = await asyncio.to_thread(use_case.execute, uow, EventRelationsQuery(event_id))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return EventRelationsResponse(event_id=result.event_id, items=[dict(i) for i in result.items])


@router.get(
    "/events/{event_id}/sessions",
    response_model=EventRelationsResponse,
    tags=["listings"],
)
async def list_event_sessions(
    event_id: str,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: ListEventSessionsUseCase = Depends(get_list_event_sessions_use_case),
):
    """Sessions of an event in running order."""
    try:
        result = await asyncio.to_thread(use_case.execute, uow, EventRelationsQuery(event_id))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return EventRelationsResponse(event_id=result.event_id, items=[dict(i) for i in result.items])
