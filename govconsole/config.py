"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_DEPLOYMENT_ID = "default-app-id"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./governance_console.db",
        description="Database connection URL backing the document store",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing session and custom tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        description="Number of minutes before session tokens expire",
        gt=0,
    )

    # Public client configuration of the deployment.
    project_api_key: str | None = Field(
        default=None,
        description="Public API key clients must present when signing in",
    )
    project_auth_domain: str | None = Field(
        default=None, description="Issuer recorded in the session tokens"
    )
    project_id: str | None = Field(
        default=None, description="Audience recorded in the session tokens"
    )
    project_storage_bucket: str | None = None
    project_messaging_sender_id: str | None = None
    project_app_id: str | None = None
    project_measurement_id: str | None = None

    deployment_id: str = Field(
        default=DEFAULT_DEPLOYMENT_ID,
        description="Identifier scoping every collection to an application instance",
        min_length=1,
    )
    initial_auth_token: str | None = Field(
        default=None,
        description="Pre-issued custom token used by console sessions that do not bring one",
    )

    gemini_api_key: str | None = Field(
        default=None, description="API key for the text-generation endpoint"
    )
    gemini_model: str = Field(default="gemini-2.0-flash", min_length=1)
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta", min_length=1
    )
    gemini_timeout_seconds: float = Field(default=30.0, gt=0)

    log_level: str = Field(default="INFO")
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma separated list of origins allowed to call the API",
    )

    @field_validator("deployment_id")
    @classmethod
    def _validate_deployment_id(cls, value: str) -> str:
        if "/" in value:
            raise ValueError("DEPLOYMENT_ID must not contain '/'")
        return value

    @model_validator(mode="after")
    def _validate_auth_pair(self) -> "Settings":
        if bool(self.project_auth_domain) ^ bool(self.project_id):
            raise ValueError(
                "PROJECT_AUTH_DOMAIN and PROJECT_ID must both be provided to scope tokens"
            )
        return self

    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["DEFAULT_DEPLOYMENT_ID", "Settings", "get_settings", "reset_settings_cache"]
