"""Distance/time matrix assembly with a synthesized fallback."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from ...models.domain import Location
from .google_client import GeodataError, GoogleMapsClient, synthesize_location
from .models import (
    METERS_PER_MILE,
    SOURCE_MOCK,
    ZERO_EDGE,
    DistanceEdge,
    DistanceMatrix,
    RoutingConfig,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MatrixBuildResult:
    matrix: DistanceMatrix
    locations: list[Location]

    @property
    def source(self) -> str:
        return self.matrix.source


def mock_distance_matrix(size: int, rng: random.Random, config: RoutingConfig) -> DistanceMatrix:
    """Build a symmetric matrix of random local-service distances.

    Distances are drawn uniformly from ``[mock_min_miles, mock_max_miles]`` and
    durations assume ``mock_minutes_per_mile``. Not geographically aware.
    """
    rows: list[list[DistanceEdge]] = [[ZERO_EDGE] * size for _ in range(size)]
    for i in range(size):
        for j in range(i + 1, size):
            miles = rng.uniform(config.mock_min_miles, config.mock_max_miles)
            edge = DistanceEdge(
                distance_meters=miles * METERS_PER_MILE,
                duration_seconds=miles * config.mock_minutes_per_mile * 60.0,
            )
            rows[i][j] = edge
            rows[j][i] = edge
    return DistanceMatrix(rows, source=SOURCE_MOCK)


class MatrixBuilder:
    """Geocodes ``[start, *stops]`` and fetches their pairwise matrix."""

    def __init__(
        self,
        client: GoogleMapsClient | None,
        config: RoutingConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.config = config or RoutingConfig()
        self.rng = rng or random.Random()

    def _synthesized_locations(self, count: int) -> list[Location]:
        return [
            synthesize_location(
                self.rng,
                self.config.service_region_latitude,
                self.config.service_region_longitude,
                self.config.geocode_jitter_degrees,
            )
            for _ in range(count)
        ]

    def build(self, start: str, stop_addresses: Sequence[str], *, allow_mock: bool = True) -> MatrixBuildResult:
        """Return a ``(1 + len(stop_addresses))``-square matrix.

        Without a client, or when the matrix fetch fails and ``allow_mock`` is
        set, the matrix is synthesized. With ``allow_mock`` unset the
        ``GeodataError`` propagates to the caller.
        """
        addresses = [start, *stop_addresses]
        expected_size = len(addresses)

        if self.client is None:
            logger.info(f"No geodata client configured; synthesizing {expected_size}x{expected_size} matrix")
            locations = self._synthesized_locations(expected_size)
            matrix = mock_distance_matrix(expected_size, self.rng, self.config)
        else:
            locations = self.client.geocode_many(addresses)
            try:
                matrix = self.client.distance_matrix(addresses)
            except GeodataError as e:
                if not allow_mock:
                    raise
                logger.warning(f"Distance matrix fetch failed: {e}. Using mock matrix.")
                matrix = mock_distance_matrix(expected_size, self.rng, self.config)

        matrix.require_size(expected_size)
        if len(locations) != expected_size:
            raise GeodataError(f"Geocoded {len(locations)} locations, expected {expected_size}.")
        logger.info(f"Built {expected_size}x{expected_size} matrix from source '{matrix.source}'")
        return MatrixBuildResult(matrix=matrix, locations=locations)
