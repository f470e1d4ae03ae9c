"""
api/routes/health.py
--------------------
Health-check endpoint — also reports which storage mode the process runs in
("remote" = cloud sync connected, "local" = file store).
"""
from __future__ import annotations

from fastapi import APIRouter

from db.selector import get_backend

router = APIRouter()


@router.get("/health", summary="Health check")
def health() -> dict:
    """Returns 200 OK when the service is running."""
    selection = get_backend()
    return {
        "status":          "ok",
        "service":         "itinerary-sync",
        "storage_mode":    selection.mode,
        "fallback_reason": selection.fallback_reason,
    }
