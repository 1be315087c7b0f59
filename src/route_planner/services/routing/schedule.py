"""Turn a visiting order into a timed itinerary with distance and fuel totals."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Stop
from .clock import format_minutes, time_sort_key
from .models import METHOD_TIME_FALLBACK, DistanceMatrix, Itinerary, OrderedStop, RoutingConfig


def estimate_fuel_cost(total_distance_miles: float, mpg: float, price_per_gallon: float) -> float:
    return (total_distance_miles / mpg) * price_per_gallon


def materialize(
    order: Sequence[int],
    stops: Sequence[Stop],
    matrix: DistanceMatrix,
    config: RoutingConfig,
    optimization_method: str,
) -> Itinerary:
    """Walk ``order`` through ``matrix`` accumulating miles and minutes.

    Each stop adds its travel time plus ``service_duration_minutes`` to the
    total. Suggested arrival times start at ``day_start_minutes``.
    """
    matrix.require_size(len(stops) + 1)
    if sorted(order) != list(range(len(stops))):
        raise ValueError(f"Route order {list(order)} is not a permutation of {len(stops)} stops.")

    service = config.service_duration_minutes
    ordered: list[OrderedStop] = []
    total_distance = 0.0
    total_duration = 0.0
    clock = float(config.day_start_minutes)
    previous = 0

    for sequence, stop_index in enumerate(order, start=1):
        stop = stops[stop_index]
        edge = matrix.edge(previous, stop_index + 1)
        travel_miles = edge.miles
        travel_minutes = edge.minutes
        total_distance += travel_miles
        total_duration += travel_minutes + service
        arrival = clock + travel_minutes

        ordered.append(
            OrderedStop(
                appointment=stop.appointment,
                sequence=sequence,
                estimated_duration=service,
                distance_from_previous=travel_miles,
                travel_time_from_previous=travel_minutes,
                optimized_time=format_minutes(arrival),
                coordinates=stop.location,
            )
        )
        clock = arrival + service
        previous = stop_index + 1

    return Itinerary(
        stops=ordered,
        total_distance=total_distance,
        total_duration=total_duration,
        estimated_fuel_cost=estimate_fuel_cost(total_distance, config.fuel_mpg, config.fuel_price_per_gallon),
        optimization_method=optimization_method,
    )


def materialize_time_based(stops: Sequence[Stop], config: RoutingConfig) -> Itinerary:
    """Order stops by their booked time and lay them into fixed slots.

    Used when no distance data is available. Legs after the first are assumed
    to be ``fallback_leg_miles`` long and take ``fallback_travel_minutes``.
    """
    ordered_stops = sorted(stops, key=lambda stop: time_sort_key(stop.scheduled_time))
    service = config.service_duration_minutes

    ordered: list[OrderedStop] = []
    total_distance = 0.0
    total_duration = 0.0
    for index, stop in enumerate(ordered_stops):
        leg_miles = config.fallback_leg_miles if index > 0 else 0.0
        leg_minutes = float(config.fallback_travel_minutes) if index > 0 else 0.0
        total_distance += leg_miles
        total_duration += leg_minutes + service
        ordered.append(
            OrderedStop(
                appointment=stop.appointment,
                sequence=index + 1,
                estimated_duration=service,
                distance_from_previous=leg_miles,
                travel_time_from_previous=leg_minutes,
                optimized_time=format_minutes(
                    config.day_start_minutes + index * config.fallback_slot_interval_minutes
                ),
                coordinates=stop.location,
            )
        )

    return Itinerary(
        stops=ordered,
        total_distance=total_distance,
        total_duration=total_duration,
        estimated_fuel_cost=estimate_fuel_cost(total_distance, config.fuel_mpg, config.fuel_price_per_gallon),
        optimization_method=METHOD_TIME_FALLBACK,
    )
