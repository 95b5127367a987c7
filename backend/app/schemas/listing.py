"""Pydantic schemas for catalog list views."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ..domain.catalog.models import Listing


class FacetOptionSchema(BaseModel):
    """One dropdown entry of a filter"""
    value: str
    label: str


class ListingResponse(BaseModel):
    """Response model for a paginated, filtered list view.

    ``stats`` is null whenever any filter is active; ``filter_options``
    is always populated.
    """
    record_type: str
    items: List[Dict[str, Any]]
    total: int
    page: int
    per_page: int
    total_pages: int
    page_window: List[Optional[int]]
    sort_by: str
    sort_order: str
    filters: Dict[str, str]
    stats: Optional[Dict[str, int]] = None
    filter_options: Dict[str, List[FacetOptionSchema]]

    @classmethod
    def from_listing(cls, listing: Listing) -> "ListingResponse":
        page = listing.page
        return cls(
            record_type=listing.record_type,
            items=[dict(item) for item in page.items],
            total=page.total,
            page=page.page,
            per_page=page.per_page,
            total_pages=page.total_pages,
            page_window=page.page_window,
            sort_by=listing.sort_key,
            sort_order=listing.sort_order,
            filters=listing.filters.to_params(),
            stats=dict(listing.facets.tallies) if listing.facets.tallies is not None else None,
            filter_options={
                name: [FacetOptionSchema(value=o.value, label=o.label) for o in options]
                for name, options in listing.facets.options.items()
            },
        )


class EventRelationsResponse(BaseModel):
    """Rows related to one event (child events or sessions)"""
    event_id: str
    items: List[Dict[str, Any]]
