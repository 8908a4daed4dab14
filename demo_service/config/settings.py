"""Application configuration and environment management."""

from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings.

    Every value can be supplied through the environment (or a local ``.env``
    file); the only one a deployment normally needs is ``PORT``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Core service metadata
    api_title: str = Field(default="Observability Demo Service", description="Human readable API title")
    api_version: str = Field(default="1.0.0", description="Semantic version exposed by FastAPI")
    host: str = Field(
        default="0.0.0.0",
        alias="HOST",
        description="Interface the HTTP server binds to.",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        alias="PORT",
        description="TCP port the HTTP server listens on.",
    )
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level used for application loggers.",
    )
    trace_id_header: str = Field(
        default="X-Trace-ID",
        alias="TRACE_ID_HEADER",
        description="HTTP response header carrying the request trace identifier.",
    )

    # Metrics configuration
    metrics_path: str = Field(
        default="/metrics",
        alias="METRICS_PATH",
        description="Path of the Prometheus scrape endpoint.",
    )
    metrics_excluded_paths: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["/metrics"],
        alias="METRICS_EXCLUDED_PATHS",
        description="Comma separated request paths that are traced and logged but not counted.",
    )
    metrics_process_collectors: bool = Field(
        default=False,
        alias="METRICS_PROCESS_COLLECTORS",
        description="Register the process, platform and GC collectors on the registry.",
    )
    metrics_duration_buckets: Annotated[Optional[list[float]], NoDecode] = Field(
        default=None,
        alias="METRICS_DURATION_BUCKETS",
        description="Comma separated histogram bucket bounds (seconds) for request durations.",
    )

    # Fibonacci endpoints
    fibonacci_recursive_max_n: PositiveInt = Field(
        default=30,
        alias="FIBONACCI_RECURSIVE_MAX_N",
        description="Largest index accepted by the naive recursive calculator.",
    )
    fibonacci_iterative_max_n: PositiveInt = Field(
        default=10000,
        alias="FIBONACCI_ITERATIVE_MAX_N",
        description="Largest index accepted by the iterative calculator.",
    )

    @field_validator("metrics_excluded_paths", mode="before")
    @classmethod
    def _split_paths(cls, value: Optional[str | list[str]]) -> list[str]:
        if value in (None, ""):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, list):
            return [item for item in value if item]
        raise TypeError("Invalid value for METRICS_EXCLUDED_PATHS")

    @field_validator("metrics_duration_buckets", mode="before")
    @classmethod
    def _split_buckets(cls, value: Optional[str | list[float]]) -> Optional[list[float]]:
        if value in (None, ""):
            return None
        if isinstance(value, str):
            return [float(item) for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [float(item) for item in value]
        raise TypeError("Invalid value for METRICS_DURATION_BUCKETS")


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
