"""Database models for the Archive Catalog"""
from .catalog import (
    Address,
    ArchiveAsset,
    Event,
    EventSession,
    Location,
    LocationAddress,
    Organization,
    OrganizationLocation,
)

__all__ = [
    "Address",
    "ArchiveAsset",
    "Event",
    "EventSession",
    "Location",
    "LocationAddress",
    "Organization",
    "OrganizationLocation",
]
