"""Route optimization request/response schemas."""

from __future__ import annotations

from datetime import date as Date
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AppointmentInput(CamelModel):
    id: Union[str, int]
    address: str
    time: str = Field(default="", description="Booked clock time, e.g. '9:00 AM'. Display only.")

    @field_validator("id", mode="after")
    @classmethod
    def _id_as_str(cls, value: Union[str, int]) -> str:
        return str(value)


class RouteOptimizationRequest(CamelModel):
    start_location: str = Field(default="", description="Address the technician departs from.")
    appointments: List[AppointmentInput] = Field(default_factory=list)
    date: Optional[Date] = Field(default=None, description="Route day, used to label exported files.")
    persist: bool = Field(default=False, description="Write the optimized route to the data directory.")


class CoordinatesModel(CamelModel):
    lat: float
    lng: float


class AppointmentRefModel(CamelModel):
    id: str
    address: str
    time: str


class OrderedStopModel(CamelModel):
    appointment: AppointmentRefModel
    address: str
    sequence: int
    coordinates: Optional[CoordinatesModel] = None
    estimated_duration: int
    distance_from_previous: float
    travel_time_from_previous: Optional[float] = None
    optimized_time: Optional[str] = None


class ItineraryResponse(CamelModel):
    stops: List[OrderedStopModel]
    total_distance: float = Field(..., description="Miles.")
    total_duration: float = Field(..., description="Minutes, including service time.")
    estimated_fuel_cost: float = Field(..., description="Dollars.")
    optimization_method: str
    directions_url: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class RouteSuggestionsResponse(CamelModel):
    date: Date
    best_start_time: str
    recommended_breaks: List[str]
    traffic_alerts: List[str]
    weather_alert: Optional[str] = None
    local_tips: List[str]
