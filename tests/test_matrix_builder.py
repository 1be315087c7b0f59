import random

import pytest

from src.route_planner.models.domain import Location
from src.route_planner.services.routing.google_client import GeodataError
from src.route_planner.services.routing.matrix_builder import MatrixBuilder, mock_distance_matrix
from src.route_planner.services.routing.models import (
    METERS_PER_MILE,
    SOURCE_GOOGLE,
    SOURCE_MOCK,
    ZERO_EDGE,
    DistanceEdge,
    DistanceMatrix,
    RoutingConfig,
)


class DummyGoogle:
    def __init__(self, fail_matrix: bool = False) -> None:
        self.fail_matrix = fail_matrix

    def geocode_many(self, addresses):
        return [Location(25.7 + i * 0.01, -80.2) for i, _ in enumerate(addresses)]

    def distance_matrix(self, addresses):
        if self.fail_matrix:
            raise GeodataError("Distance Matrix API error: 'OVER_QUERY_LIMIT'")
        count = len(addresses)
        return DistanceMatrix(
            [[ZERO_EDGE if i == j else DistanceEdge(1000.0, 120.0) for j in range(count)] for i in range(count)],
            source=SOURCE_GOOGLE,
        )


def test_mock_matrix_is_symmetric_with_zero_diagonal_and_bounded_values():
    config = RoutingConfig(mock_min_miles=2.0, mock_max_miles=17.0, mock_minutes_per_mile=2.5)

    matrix = mock_distance_matrix(6, random.Random(3), config)

    assert matrix.source == SOURCE_MOCK
    for i in range(6):
        assert matrix.edge(i, i) == ZERO_EDGE
        for j in range(6):
            if i == j:
                continue
            edge = matrix.edge(i, j)
            assert edge == matrix.edge(j, i)
            assert 2.0 <= edge.distance_meters / METERS_PER_MILE <= 17.0
            assert edge.minutes == pytest.approx(edge.miles * 2.5)


def test_mock_matrix_is_reproducible_with_seeded_rng():
    config = RoutingConfig()

    first = mock_distance_matrix(4, random.Random(11), config)
    second = mock_distance_matrix(4, random.Random(11), config)

    assert [list(first[i]) for i in range(4)] == [list(second[i]) for i in range(4)]


@pytest.mark.parametrize("stop_count", [1, 3, 12])
def test_build_returns_square_matrix_for_live_and_mock_sources(stop_count: int):
    stops = [f"{n} Ocean Dr" for n in range(stop_count)]

    live = MatrixBuilder(DummyGoogle(), RoutingConfig(), random.Random(1)).build("HQ", stops)
    fallback = MatrixBuilder(DummyGoogle(fail_matrix=True), RoutingConfig(), random.Random(1)).build("HQ", stops)
    offline = MatrixBuilder(None, RoutingConfig(), random.Random(1)).build("HQ", stops)

    for result in (live, fallback, offline):
        assert result.matrix.size == stop_count + 1
        assert len(result.locations) == stop_count + 1
    assert live.source == SOURCE_GOOGLE
    assert fallback.source == SOURCE_MOCK
    assert offline.source == SOURCE_MOCK
    assert all(location.synthesized for location in offline.locations)


def test_build_propagates_matrix_failure_when_mock_disallowed():
    builder = MatrixBuilder(DummyGoogle(fail_matrix=True), RoutingConfig(), random.Random(1))

    with pytest.raises(GeodataError):
        builder.build("HQ", ["A", "B"], allow_mock=False)
