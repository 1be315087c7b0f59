"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ...config import settings
from ...models.domain import Appointment, Location

METERS_PER_MILE = 1609.34

METHOD_LIVE = "google_maps_tsp"
METHOD_MOCK_MATRIX = "nearest_neighbor_mock_matrix"
METHOD_TIME_FALLBACK = "time-based-fallback"

SOURCE_GOOGLE = "google_maps"
SOURCE_MOCK = "mock"


class MatrixShapeError(ValueError):
    """Raised when a distance matrix breaks the square/zero-diagonal contract."""


@dataclass(slots=True)
class RoutingConfig:
    service_duration_minutes: int = settings.service_duration_minutes
    fuel_mpg: float = settings.fuel_mpg
    fuel_price_per_gallon: float = settings.fuel_price_per_gallon
    day_start_minutes: int = settings.day_start_minutes
    fallback_slot_interval_minutes: int = settings.fallback_slot_interval_minutes
    fallback_leg_miles: float = settings.fallback_leg_miles
    fallback_travel_minutes: int = settings.fallback_travel_minutes
    mock_min_miles: float = settings.mock_min_miles
    mock_max_miles: float = settings.mock_max_miles
    mock_minutes_per_mile: float = settings.mock_minutes_per_mile
    mock_matrix_on_failure: bool = settings.mock_matrix_on_failure
    service_region_latitude: float = settings.service_region_latitude
    service_region_longitude: float = settings.service_region_longitude
    geocode_jitter_degrees: float = settings.geocode_jitter_degrees


@dataclass(frozen=True, slots=True)
class DistanceEdge:
    distance_meters: float
    duration_seconds: float

    @property
    def miles(self) -> float:
        return self.distance_meters / METERS_PER_MILE

    @property
    def minutes(self) -> float:
        return self.duration_seconds / 60.0


ZERO_EDGE = DistanceEdge(0.0, 0.0)


class DistanceMatrix:
    """Square ``[from][to]`` table of edges. Index 0 is the start location."""

    __slots__ = ("_rows", "source")

    def __init__(self, rows: Sequence[Sequence[DistanceEdge]], source: str = SOURCE_GOOGLE) -> None:
        self._rows: tuple[tuple[DistanceEdge, ...], ...] = tuple(tuple(row) for row in rows)
        self.source = source
        size = len(self._rows)
        for index, row in enumerate(self._rows):
            if len(row) != size:
                raise MatrixShapeError(f"Matrix row {index} has {len(row)} entries, expected {size}.")
            if row[index].distance_meters != 0 or row[index].duration_seconds != 0:
                raise MatrixShapeError(f"Matrix diagonal entry [{index}][{index}] must be the zero edge.")

    @property
    def size(self) -> int:
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> tuple[DistanceEdge, ...]:
        return self._rows[index]

    def edge(self, origin: int, destination: int) -> DistanceEdge:
        return self._rows[origin][destination]

    def require_size(self, expected: int) -> None:
        if self.size != expected:
            raise MatrixShapeError(f"Matrix is {self.size}x{self.size}, expected {expected}x{expected}.")


@dataclass(slots=True)
class OrderedStop:
    appointment: Appointment
    sequence: int
    estimated_duration: int
    distance_from_previous: float
    travel_time_from_previous: Optional[float] = None
    optimized_time: Optional[str] = None
    coordinates: Optional[Location] = None

    @property
    def address(self) -> str:
        return self.appointment.address


@dataclass(slots=True)
class Itinerary:
    stops: List[OrderedStop]
    total_distance: float
    total_duration: float
    estimated_fuel_cost: float
    optimization_method: str
    metadata: dict = field(default_factory=dict)
