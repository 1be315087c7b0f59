"""Static daily route guidance for the Miami service region."""

from __future__ import annotations

from datetime import date

BEST_START_TIME = "8:00 AM"
RECOMMENDED_BREAKS = ("12:00 PM", "3:30 PM")
TRAFFIC_ALERTS = (
    "Heavy traffic expected on I-95 between 7-9 AM and 4-6 PM",
    "US-1 through Coral Gables - expect delays during lunch hours",
    "Biscayne Blvd construction - add 15 minutes for downtown appointments",
)
LOCAL_TIPS = (
    "Start early to avoid afternoon thunderstorms (typical 2-4 PM)",
    "Beach areas (South Beach, Key Biscayne) - parking can be challenging",
    "Coral Gables has strict parking enforcement - allow extra time",
)


def route_suggestions(day: date) -> dict:
    return {
        "date": day,
        "best_start_time": BEST_START_TIME,
        "recommended_breaks": list(RECOMMENDED_BREAKS),
        "traffic_alerts": list(TRAFFIC_ALERTS),
        "weather_alert": None,
        "local_tips": list(LOCAL_TIPS),
    }
