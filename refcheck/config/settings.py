"""
Application Settings - Pydantic Settings for configuration management.

Supports environment variables and .env file loading. Command line options
take precedence over these values.
"""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import BeforeValidator, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from refcheck.graph.integrity.presence_set import DEFAULT_CHUNK_BITS


def normalize_to_lowercase(v: str) -> str:
    """Normalize string to lowercase."""
    if isinstance(v, str):
        return v.lower()
    return v


class CheckSettings(BaseSettings):
    """Reference check settings."""

    model_config = SettingsConfigDict(env_prefix="REFCHECK_")

    show_ids: bool = Field(default=False, description="Emit each missing reference, not just counts")
    check_relations: bool = Field(
        default=False,
        description="Also check relation members (tracks way IDs, needs more memory)",
    )
    input_format: str | None = Field(
        default=None, description="Input file format (required when reading from STDIN)"
    )

    # Presence set tuning
    presence_chunk_bits: int = Field(
        default=DEFAULT_CHUNK_BITS,
        description="Growth step of the presence bit arrays, in bits",
    )

    @field_validator("presence_chunk_bits")
    @classmethod
    def _check_chunk_bits(cls, v: int) -> int:
        if v <= 0 or v % 8:
            raise ValueError("presence_chunk_bits must be a positive multiple of 8")
        return v


class ObservabilitySettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_")

    log_format: Annotated[
        Literal["json", "console"],
        BeforeValidator(normalize_to_lowercase),
    ] = Field(
        default="console", description="Log format (json for pipelines, console for terminals)"
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="refcheck", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING", description="Logging level (verbose mode lowers it to INFO)"
    )

    # Sub-settings
    check: CheckSettings = Field(default_factory=CheckSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
