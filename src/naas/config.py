import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic_settings import BaseSettings

from .chaos.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Deployment environment checked against the engine's active environments
    environment: str = "development"

    # ------------------------------------------------------------------
    # Engine options
    # ------------------------------------------------------------------
    # naas_config_file points at a JSON object of engine options
    # (errorRate, errors, delays, ...). The scalar overrides below are
    # layered on top of it.
    naas_config_file: Optional[Path] = None
    naas_error_rate: Optional[float] = None
    naas_response_format: Optional[Literal["json", "xml", "plain"]] = None

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_engine_options(settings: Settings) -> dict[str, Any]:
    """Read engine options from the configured JSON file and apply env overrides."""
    options: dict[str, Any] = {}
    if settings.naas_config_file is not None:
        try:
            options = json.loads(settings.naas_config_file.read_text())
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot load engine options from {settings.naas_config_file}: {e}") from e
        if not isinstance(options, dict):
            raise ConfigError(f"Engine options in {settings.naas_config_file} must be a JSON object")

    if settings.naas_error_rate is not None:
        options["errorRate"] = settings.naas_error_rate
    if settings.naas_response_format is not None:
        options["responseFormat"] = settings.naas_response_format
    return options
