"""Route optimization endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import ItineraryResponse, RouteOptimizationRequest, RouteSuggestionsResponse
from ...services.routing.service import RouteValidationError, optimize_route
from ...services.routing.suggestions import route_suggestions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/route-optimization", tags=["route-optimization"])


@router.post("/optimize", response_model=ItineraryResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RouteOptimizationRequest) -> ItineraryResponse:
    try:
        return optimize_route(payload)
    except RouteValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to optimize route",
        ) from exc


@router.get("/suggestions/{day}", response_model=RouteSuggestionsResponse, status_code=status.HTTP_200_OK)
def suggestions(day: str) -> RouteSuggestionsResponse:
    try:
        parsed = date.fromisoformat(day)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date '{day}'. Expected YYYY-MM-DD.",
        ) from exc
    return RouteSuggestionsResponse.model_validate(route_suggestions(parsed))
