"""Mini README: Centralised configuration for the DroneRoute service.

Structure:
    * DroneRouteSettings - pydantic settings model read from the environment.
    * get_settings - cached accessor so validation happens once per process.

Usage:
    The upstream data-source endpoint is configured here and handed to the
    client constructor explicitly; nothing in the planning engine reads the
    environment on its own. ``ILP_ENDPOINT`` is still honoured for deployments
    that predate the ``DRONEROUTE_`` prefix.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_SOURCE_URL = "https://ilp-rest-2025-bvh6e9hschfagrgy.ukwest-01.azurewebsites.net"


class DroneRouteSettings(BaseSettings):
    """Runtime configuration for the DroneRoute service."""

    model_config = SettingsConfigDict(
        env_prefix="DRONEROUTE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_source_url: str = Field(
        DEFAULT_DATA_SOURCE_URL,
        description="Base URL of the REST service supplying drones, service points and no-fly zones.",
        validation_alias=AliasChoices("DRONEROUTE_DATA_SOURCE_URL", "ILP_ENDPOINT"),
    )
    request_timeout_seconds: float = Field(
        30.0,
        description="Timeout applied to every upstream data-source request.",
        gt=0,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level.")

    @field_validator("data_source_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Endpoint paths are appended with a leading slash."""

        value = value.strip()
        if not value:
            raise ValueError("data_source_url must not be empty")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache()
def get_settings() -> DroneRouteSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return DroneRouteSettings()
