"""Domain models for appointments and geocoded locations."""

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Location:
    """A geocoded point. ``synthesized`` marks a fallback point, not a real geocode."""

    latitude: float
    longitude: float
    synthesized: bool = False

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinates must be finite, got ({self.latitude}, {self.longitude}).")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude {self.latitude} is outside [-90, 90].")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude {self.longitude} is outside [-180, 180].")

    def as_dict(self) -> dict:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True, slots=True)
class Appointment:
    """One booked visit as supplied by the appointment source."""

    appointment_id: str
    address: str
    time: str


@dataclass(frozen=True, slots=True)
class Stop:
    """An appointment bound to its location for a single optimization run."""

    appointment: Appointment
    location: Optional[Location] = None

    @property
    def address(self) -> str:
        return self.appointment.address

    @property
    def scheduled_time(self) -> str:
        return self.appointment.time
