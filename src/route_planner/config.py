"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GROOM_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Mobile Grooming Route Optimizer"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for exported route files.")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Geodata provider (Google Maps web services)
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps API key. Live geodata is disabled when unset.",
    )
    google_geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    google_distance_matrix_url: str = "https://maps.googleapis.com/maps/api/distancematrix/json"
    geodata_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geodata_max_retries: int = Field(default=1, ge=0)
    geodata_backoff_seconds: float = Field(default=0.5, ge=0.0)

    # Service region used for synthesized geocodes
    service_region_latitude: float = Field(default=25.7617, ge=-90.0, le=90.0)
    service_region_longitude: float = Field(default=-80.1918, ge=-180.0, le=180.0)
    geocode_jitter_degrees: float = Field(default=0.1, ge=0.0)

    # Mock matrix generator
    mock_min_miles: float = Field(default=2.0, ge=0.0)
    mock_max_miles: float = Field(default=17.0, ge=0.0)
    mock_minutes_per_mile: float = Field(default=2.5, ge=0.0)
    mock_matrix_on_failure: bool = Field(
        default=True,
        description="Solve over a synthesized matrix when the matrix fetch fails instead of degrading.",
    )

    # Schedule and cost constants
    service_duration_minutes: int = Field(default=60, ge=0)
    fuel_mpg: float = Field(default=25.0, gt=0.0)
    fuel_price_per_gallon: float = Field(default=3.50, ge=0.0)
    day_start_minutes: int = Field(default=9 * 60, ge=0, description="Minutes after midnight the route day starts.")
    fallback_slot_interval_minutes: int = Field(default=90, ge=1)
    fallback_leg_miles: float = Field(default=5.0, ge=0.0)
    fallback_travel_minutes: int = Field(default=15, ge=0)

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
