"""Nearest-neighbor TSP heuristic over a distance matrix."""

from __future__ import annotations

import math

from .models import DistanceMatrix


def solve_nearest_neighbor(matrix: DistanceMatrix, stop_count: int) -> list[int]:
    """Return a visiting order of stop-list indices ``0..stop_count-1``.

    Starts at matrix node 0 and repeatedly moves to the closest unvisited stop
    by ``distance_meters``. Stop ``i`` lives at matrix index ``i + 1``. Ties go
    to the lowest stop index. No improvement pass is applied, so the tour is
    greedy rather than optimal.
    """
    if stop_count < 0:
        raise ValueError("stop_count must be non-negative.")
    matrix.require_size(stop_count + 1)

    if stop_count == 0:
        return []
    if stop_count == 1:
        return [0]

    visited = [False] * stop_count
    order: list[int] = []
    current = 0

    while len(order) < stop_count:
        nearest_distance = math.inf
        nearest_index = -1
        row = matrix[current]
        for candidate in range(stop_count):
            if visited[candidate]:
                continue
            distance = row[candidate + 1].distance_meters
            if distance < nearest_distance:
                nearest_distance = distance
                nearest_index = candidate
        if nearest_index == -1:
            # every remaining edge is infinite; keep input order for the rest
            nearest_index = visited.index(False)
        visited[nearest_index] = True
        order.append(nearest_index)
        current = nearest_index + 1

    return order
