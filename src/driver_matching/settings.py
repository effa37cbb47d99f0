from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from driver_matching.geo.geohash import MAX_PRECISION, MIN_PRECISION


class MatchingSettings(BaseSettings):
    """Geohash index and nearest-driver search configuration."""

    index_precision: int = Field(
        default=6,
        ge=MIN_PRECISION,
        le=MAX_PRECISION,
        description="Geohash length stored on each driver and used as the index key",
    )
    search_precisions: list[int] = Field(
        default_factory=lambda: [5, 4, 3],
        description="Precision ladder tried in order until enough candidates are found",
    )
    min_candidates: int = Field(
        default=3,
        ge=1,
        description="Candidates required before the search stops widening",
    )
    average_speed_kmh: float = Field(
        default=40.0,
        gt=0.0,
        le=200.0,
        description="Assumed constant speed for ETA estimates",
    )
    radius_widening_factor: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Candidate budget multiplier for radius searches",
    )
    default_max_drivers: int = Field(default=5, ge=1)
    max_drivers_limit: int = Field(default=20, ge=1)

    model_config = SettingsConfigDict(env_prefix="MATCHING_")

    @field_validator("search_precisions")
    @classmethod
    def validate_search_precisions(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("search_precisions must not be empty")
        for precision in v:
            if not MIN_PRECISION <= precision <= MAX_PRECISION:
                raise ValueError(
                    f"search precision {precision} outside [{MIN_PRECISION}, {MAX_PRECISION}]"
                )
        if any(coarser >= finer for finer, coarser in zip(v, v[1:], strict=False)):
            raise ValueError("search_precisions must be strictly decreasing")
        return v


class ServiceSettings(BaseSettings):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="SERVICE_")


class CORSSettings(BaseSettings):
    origins: str = "http://localhost:5173,http://localhost:3000"

    model_config = SettingsConfigDict(env_prefix="CORS_")


class Settings(BaseSettings):
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
