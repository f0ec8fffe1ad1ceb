"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from formparams.exceptions import SettingsError
from formparams.typing.enums import RepeatedKeyPolicy


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "formparams"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    required_message: str = Field(
        default="Required",
        validation_alias="REQUIRED_MESSAGE",
        description="Fallback message for missing required fields.",
    )
    repeated_key_policy: RepeatedKeyPolicy = Field(
        default=RepeatedKeyPolicy.FIRST,
        validation_alias="REPEATED_KEY_POLICY",
        description="Occurrence kept when a scalar field receives a repeated key ('first' or 'last').",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Every field has a default, so loading only fails on invalid values.

    Raises:
        SettingsError: If settings cannot be validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        raise SettingsError(exc=exc) from exc
