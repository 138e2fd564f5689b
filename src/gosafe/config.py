"""Application configuration and settings management."""

from typing import Any, Literal

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GOSAFE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "GoSafe Navigation API"
    api_prefix: str = "/api"
    osrm_base_url: str | None = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["foot", "walking", "driving"] = Field(
        default="foot",
        description="OSRM profile to use when computing pedestrian routes.",
    )
    osrm_geometries: Literal["geojson", "polyline"] = Field(
        default="geojson",
        description="Geometry encoding requested from OSRM.",
    )
    osrm_timeout_seconds: float = Field(default=10.0, gt=0.0)
    osrm_connect_timeout_seconds: float = Field(default=5.0, gt=0.0)
    osrm_max_retries: int = Field(default=1, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    fetch_phase_timeout_seconds: float = Field(
        default=25.0,
        gt=0.0,
        description=(
            "Deadline for a whole fetch phase (direct or detour). Must exceed "
            "provider_call_budget_seconds so a retried call can still finish."
        ),
    )
    max_parallel_requests: int = Field(default=4, ge=1)

    # Degree-space constants, see services.geospatial.distance
    safe_distance_threshold: float = Field(
        default=0.0012,
        gt=0.0,
        description="A hazard closer than this to any route vertex counts against the route (~130 m).",
    )
    detour_offset: float = Field(
        default=0.0015,
        gt=0.0,
        description="Offset of detour waypoints from the start/end midpoint (~165 m).",
    )

    duration_correction_enabled: bool = True
    max_walking_speed_mps: float = Field(default=1.5, gt=0.0)
    assumed_walking_speed_mps: float = Field(default=1.25, gt=0.0)

    undo_window_seconds: float = Field(default=3.0, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:8081",
            "http://127.0.0.1:8081",
            "http://localhost:19006",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

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

    @property
    def provider_call_budget_seconds(self) -> float:
        """Worst-case duration of one OSRM call including retries and backoff sleeps."""
        retries = self.osrm_max_retries
        exponential_backoff = self.osrm_backoff_seconds * (2 ** retries - 1)
        linear_backoff = self.osrm_backoff_seconds * retries * (retries + 1) / 2
        return self.osrm_timeout_seconds * (retries + 1) + max(exponential_backoff, linear_backoff)

    @model_validator(mode="after")
    def _check_phase_timeout(self) -> "Settings":
        budget = self.provider_call_budget_seconds
        if self.fetch_phase_timeout_seconds <= budget:
            raise ValueError(
                f"fetch_phase_timeout_seconds ({self.fetch_phase_timeout_seconds}) must exceed the "
                f"OSRM retry budget of {budget:.1f}s (timeout x attempts + backoff)"
            )
        return self


settings = Settings()
