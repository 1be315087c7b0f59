"""Route optimization orchestration service."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, timezone
from typing import Callable, Sequence
from urllib.parse import quote

from ...models.domain import Appointment, Stop
from ...persistence.filesystem import FileStorage
from ...schemas.routing import ItineraryResponse, RouteOptimizationRequest
from ..outputs.itinerary_formatter import itinerary_to_csv, itinerary_to_json
from .google_client import GeodataUnavailableError, GoogleMapsClient, synthesize_location
from .matrix_builder import MatrixBuilder
from .models import (
    METHOD_LIVE,
    METHOD_MOCK_MATRIX,
    SOURCE_GOOGLE,
    Itinerary,
    MatrixShapeError,
    RoutingConfig,
)
from .schedule import materialize, materialize_time_based
from .solver import solve_nearest_neighbor

logger = logging.getLogger(__name__)

GOOGLE_DIRECTIONS_BASE = "https://www.google.com/maps/dir"


class RouteValidationError(ValueError):
    """Raised when a request cannot be optimized as given."""


def _validate(start_location: str, appointments: Sequence[Appointment]) -> None:
    if not start_location or not start_location.strip() or not appointments:
        raise RouteValidationError("Starting location and appointments are required")
    blank = [appointment.appointment_id for appointment in appointments if not appointment.address.strip()]
    if blank:
        raise RouteValidationError(f"Appointments missing an address: {', '.join(blank)}")


class RouteOptimizer:
    """Runs validate -> live matrix -> solve -> materialize, degrading to time order.

    Holds no state between calls; each ``optimize`` builds its own matrix and
    itinerary.
    """

    def __init__(
        self,
        config: RoutingConfig | None = None,
        *,
        client_factory: Callable[..., GoogleMapsClient] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or RoutingConfig()
        self.client_factory = client_factory
        self.rng = rng or random.Random()

    def _create_client(self) -> GoogleMapsClient | None:
        factory = self.client_factory or GoogleMapsClient
        try:
            return factory(
                region_latitude=self.config.service_region_latitude,
                region_longitude=self.config.service_region_longitude,
                jitter_degrees=self.config.geocode_jitter_degrees,
                rng=self.rng,
            )
        except GeodataUnavailableError as e:
            logger.warning(f"{e} Using time-based ordering.")
            return None

    def _degrade(self, stops: Sequence[Stop], reason: str) -> Itinerary:
        # degraded stops still carry service-region points for map display
        located = [
            stop
            if stop.location is not None
            else Stop(
                appointment=stop.appointment,
                location=synthesize_location(
                    self.rng,
                    self.config.service_region_latitude,
                    self.config.service_region_longitude,
                    self.config.geocode_jitter_degrees,
                ),
            )
            for stop in stops
        ]
        itinerary = materialize_time_based(located, self.config)
        itinerary.metadata.update({"degraded": True, "reason": reason})
        return itinerary

    def optimize(self, start_location: str, appointments: Sequence[Appointment]) -> Itinerary:
        _validate(start_location, appointments)
        stops = [Stop(appointment=appointment) for appointment in appointments]

        client = self._create_client()
        if client is None:
            return self._degrade(stops, reason="geodata provider not configured")

        builder = MatrixBuilder(client, self.config, self.rng)
        try:
            build = builder.build(
                start_location,
                [stop.address for stop in stops],
                allow_mock=self.config.mock_matrix_on_failure,
            )
        except MatrixShapeError:
            raise
        except Exception as e:
            logger.warning(f"Live geodata unavailable ({type(e).__name__}: {e}). Using time-based ordering.")
            return self._degrade(stops, reason=f"geodata failure: {type(e).__name__}")

        located_stops = [
            Stop(appointment=stop.appointment, location=location)
            for stop, location in zip(stops, build.locations[1:])
        ]
        order = solve_nearest_neighbor(build.matrix, len(located_stops))
        method = METHOD_LIVE if build.source == SOURCE_GOOGLE else METHOD_MOCK_MATRIX
        logger.info(f"Solved route over {len(located_stops)} stops using {method}")

        itinerary = materialize(order, located_stops, build.matrix, self.config, method)
        start_point = build.locations[0]
        itinerary.metadata.update(
            {
                "degraded": False,
                "matrix_source": build.source,
                "start_coordinates": start_point.as_dict(),
                "synthesized_locations": sum(1 for location in build.locations if location.synthesized),
            }
        )
        return itinerary


def build_directions_url(start_location: str, itinerary: Itinerary) -> str | None:
    """Google Maps directions link visiting the itinerary's stops in order."""
    if not itinerary.stops:
        return None
    waypoints = [start_location, *(stop.address for stop in itinerary.stops)]
    return "/".join([GOOGLE_DIRECTIONS_BASE, *(quote(point, safe="") for point in waypoints)])


def _persist_route(payload: RouteOptimizationRequest, itinerary: Itinerary, route_day: date) -> None:
    storage = FileStorage()
    run_dir = storage.make_run_directory(prefix=f"route_{route_day.isoformat()}")
    storage.write_json(
        run_dir / "route.json",
        {
            "date": route_day.isoformat(),
            "startLocation": payload.start_location,
            "optimizedRoute": itinerary_to_json(itinerary),
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        },
    )
    storage.write_csv(run_dir / "stops.csv", itinerary_to_csv(itinerary))
    logger.info(f"Route export written to {run_dir}")


def optimize_route(payload: RouteOptimizationRequest, optimizer: RouteOptimizer | None = None) -> ItineraryResponse:
    appointments = [
        Appointment(appointment_id=str(item.id), address=item.address, time=item.time)
        for item in payload.appointments
    ]
    optimizer = optimizer or RouteOptimizer()
    itinerary = optimizer.optimize(payload.start_location, appointments)

    route_day = payload.date or datetime.now(timezone.utc).date()
    itinerary.metadata.setdefault("date", route_day.isoformat())

    if payload.persist:
        try:
            _persist_route(payload, itinerary, route_day)
        except OSError as exc:
            logger.error(f"Failed to export route: {exc}")

    body = itinerary_to_json(itinerary)
    body["directionsUrl"] = build_directions_url(payload.start_location, itinerary)
    return ItineraryResponse.model_validate(body)
