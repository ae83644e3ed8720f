"""Configuration management for gen-ai-example.

Loads configuration from TOML files with environment variable overrides.
Uses pydantic-settings for validation and type safety. Tracing settings
also honour the standard OTEL_* variables.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ExporterType = Literal["console", "http", "auto"]

DEFAULT_OTLP_HTTP_ENDPOINT = "http://localhost:4318"


class GeneralSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_prefix="GEN_AI_EXAMPLE_")

    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON structured logging")


class TracingSettings(BaseSettings):
    """OpenTelemetry tracing settings."""

    model_config = SettingsConfigDict(env_prefix="GEN_AI_EXAMPLE_TRACING_", populate_by_name=True)

    enabled: bool = Field(default=True, description="Enable tracing")
    exporter: ExporterType = Field(
        default="console",
        validation_alias=AliasChoices(
            "GEN_AI_EXAMPLE_TRACING_EXPORTER", "OTEL_TRACES_EXPORTER"
        ),
        description="Span exporter: console, http or auto",
    )
    endpoint: str = Field(
        default="",
        validation_alias=AliasChoices(
            "GEN_AI_EXAMPLE_TRACING_ENDPOINT", "OTEL_EXPORTER_OTLP_ENDPOINT"
        ),
        description="OTLP/HTTP endpoint, e.g. http://localhost:4318",
    )
    service_name: str = Field(
        default="gen-ai-example",
        validation_alias=AliasChoices(
            "GEN_AI_EXAMPLE_TRACING_SERVICE_NAME", "OTEL_SERVICE_NAME"
        ),
        description="Service name reported on every span",
    )

    @field_validator("exporter", mode="before")
    @classmethod
    def _normalize_exporter(cls, value: Any) -> Any:
        if value is None or value == "":
            return "console"
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "otlp":
                return "http"
        return value

    def resolved_endpoint(self) -> str:
        return self.endpoint or DEFAULT_OTLP_HTTP_ENDPOINT


class AgentSettings(BaseSettings):
    """Agent and planner settings."""

    model_config = SettingsConfigDict(env_prefix="GEN_AI_EXAMPLE_AGENT_")

    name: str = Field(default="assistant", description="Agent name used in spans")
    summarize_delay_ms: int = Field(
        default=100, ge=0, description="Simulated latency of the summarize step"
    )
    planning_delay_ms: int = Field(
        default=200, ge=0, description="Simulated latency of the planning step"
    )
    default_city: str = Field(
        default="Beijing", description="City used when the objective names none"
    )


class Settings(BaseSettings):
    """Main application settings.

    Configuration is loaded in the following order (later overrides earlier):
    1. Default values in this class
    2. Values from the config file (if one exists)
    3. Environment variables
    """

    model_config = SettingsConfigDict(env_prefix="GEN_AI_EXAMPLE_")

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    tracing: TracingSettings = Field(default_factory=TracingSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)

    @classmethod
    def from_toml(cls, path: Path | str) -> Settings:
        """Load settings from a TOML file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary."""
        return cls(
            general=GeneralSettings(**data.get("general", {})),
            tracing=TracingSettings(**data.get("tracing", {})),
            agent=AgentSettings(**data.get("agent", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary."""
        return {
            "general": self.general.model_dump(),
            "tracing": self.tracing.model_dump(),
            "agent": self.agent.model_dump(),
        }


def _find_config_file() -> Path | None:
    """Find the config file in standard locations."""
    candidates = [
        Path("gen_ai_example.toml"),
        Path("config.toml"),
        Path.home() / ".config" / "gen-ai-example" / "config.toml",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


@lru_cache
def get_settings(config_path: str | None = None) -> Settings:
    """Get the application settings.

    The result is cached after first call.

    Args:
        config_path: Optional explicit path to config file.
    """
    settings = Settings()

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        settings = Settings.from_toml(path)

    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
