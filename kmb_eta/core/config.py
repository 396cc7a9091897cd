"""Client configuration.

Environment variables are loaded from .env file and can be overridden.
All settings have sensible defaults for talking to the public KMB endpoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kmb_eta.services.kmb_dto import Language

SUPPORTED_LANGUAGES = tuple(language.value for language in Language)


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # ==========================================================================
    # Endpoint
    # ==========================================================================

    eta_url: str = Field(default="https://etav3.kmb.hk/", alias="KMB_ETA_URL")
    proxy_url: str | None = Field(
        default=None,
        alias="KMB_PROXY_URL",
        description="Prefix prepended verbatim to every outgoing request URL.",
    )
    language: str = Field(default="en", alias="KMB_LANGUAGE")
    eta_attempts: int = Field(default=5, alias="KMB_ETA_ATTEMPTS", ge=0)
    http_timeout_seconds: float = Field(
        default=10.0, alias="KMB_HTTP_TIMEOUT_SECONDS", gt=0
    )
    timezone: str = Field(default="Asia/Hong_Kong", alias="KMB_TIMEZONE")
    user_agent: str = Field(default="kmb-eta/0.1.0", alias="KMB_USER_AGENT")

    # ==========================================================================
    # Credentials (used by StaticSecretProvider)
    # ==========================================================================

    vendor_id: str = Field(default="", alias="KMB_VENDOR_ID")
    api_key: str | None = Field(default=None, alias="KMB_API_KEY")
    api_ctr: int | None = Field(default=None, alias="KMB_API_CTR")

    # ==========================================================================
    # OpenTelemetry (optional)
    # ==========================================================================

    otel_enabled: bool = Field(default=False, alias="OTEL_ENABLED")
    otel_service_name: str = Field(default="kmb-eta", alias="OTEL_SERVICE_NAME")
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4317", alias="OTEL_EXPORTER_OTLP_ENDPOINT"
    )

    # ==========================================================================
    # Pydantic Settings Config
    # ==========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("proxy_url", mode="before")
    @classmethod
    def blank_proxy_is_none(cls, value: Any) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("language")
    @classmethod
    def validate_language(cls, value: str) -> str:
        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language '{value}'. "
                f"Expected one of: {', '.join(SUPPORTED_LANGUAGES)}."
            )
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone '{value}'.") from exc
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
