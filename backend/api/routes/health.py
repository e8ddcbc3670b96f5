"""
api/routes/health.py
--------------------
Health-check endpoint with per-category catalog counts.
"""
from __future__ import annotations

from fastapi import APIRouter

from modules.catalog import get_catalog

router = APIRouter()


@router.get("/health", summary="Health check")
def health() -> dict:
    """Returns 200 OK when the service is running, with catalog sizes."""
    return {
        "status": "ok",
        "service": "concierge-backend",
        "catalog": get_catalog().stats(),
    }
