"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_geodata_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.google_client import check_health as geodata_health_check
    return geodata_health_check


@router.get("/health/geodata", status_code=status.HTTP_200_OK)
def health_geodata() -> dict:
    """Report whether live geodata is configured and reachable."""
    configured = bool(settings.google_maps_api_key)
    if not configured:
        return {"service": "google_maps", "configured": False, "healthy": False}
    try:
        geodata_health_check = _get_geodata_health_check()
        return {"service": "google_maps", "configured": True, "healthy": geodata_health_check()}
    except Exception as e:
        return {"service": "google_maps", "configured": True, "healthy": False, "error": str(e)}
