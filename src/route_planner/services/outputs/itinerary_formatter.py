"""Serializers for itinerary outputs."""

from __future__ import annotations

import csv
import io

from ..routing.models import Itinerary, OrderedStop


def _stop_to_json(stop: OrderedStop) -> dict:
    appointment = stop.appointment
    return {
        "appointment": {
            "id": appointment.appointment_id,
            "address": appointment.address,
            "time": appointment.time,
        },
        "address": stop.address,
        "sequence": stop.sequence,
        "coordinates": stop.coordinates.as_dict() if stop.coordinates else None,
        "estimatedDuration": stop.estimated_duration,
        "distanceFromPrevious": stop.distance_from_previous,
        "travelTimeFromPrevious": stop.travel_time_from_previous,
        "optimizedTime": stop.optimized_time,
    }


def itinerary_to_json(itinerary: Itinerary) -> dict:
    return {
        "stops": [_stop_to_json(stop) for stop in itinerary.stops],
        "totalDistance": itinerary.total_distance,
        "totalDuration": itinerary.total_duration,
        "estimatedFuelCost": itinerary.estimated_fuel_cost,
        "optimizationMethod": itinerary.optimization_method,
        "metadata": itinerary.metadata,
    }


def itinerary_to_csv(itinerary: Itinerary) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "appointment_id",
        "address",
        "scheduled_time",
        "optimized_time",
        "distance_from_previous_mi",
        "travel_time_from_previous_min",
        "total_distance_mi",
        "total_duration_min",
        "optimization_method",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in itinerary.stops:
        writer.writerow(
            {
                "sequence": stop.sequence,
                "appointment_id": stop.appointment.appointment_id,
                "address": stop.address,
                "scheduled_time": stop.appointment.time,
                "optimized_time": stop.optimized_time or "",
                "distance_from_previous_mi": round(stop.distance_from_previous, 2),
                "travel_time_from_previous_min": (
                    round(stop.travel_time_from_previous, 1) if stop.travel_time_from_previous is not None else ""
                ),
                "total_distance_mi": round(itinerary.total_distance, 2),
                "total_duration_min": round(itinerary.total_duration, 1),
                "optimization_method": itinerary.optimization_method,
            }
        )
    return buffer.getvalue()
