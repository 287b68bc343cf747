"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified prefix.
When new endpoints are added or when new domains are introduced,
update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import experiences

router = APIRouter()

router.include_router(experiences.router, prefix="/experiences", tags=["experiences"])
