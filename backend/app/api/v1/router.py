"""Aggregate router for API v1."""
from fastapi import APIRouter

from . import listings

router = APIRouter()
router.include_router(listings.router)
