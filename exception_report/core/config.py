"""
Configuration module for the exception report package.

The Settings object centralizes environment-driven configuration so that the
builder and the HTTP adapter agree on the application name, the default
message and the metadata tag stamped onto every report.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ERROR_MESSAGE = "Unable to complete request."
REPORT_METADATA = "exception-core-model"


class Settings(BaseSettings):
    """Report configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    application_name: str = Field(
        default="unknown-application",
        alias="REPORT_APPLICATION_NAME",
    )
    default_message: str = Field(
        default=DEFAULT_ERROR_MESSAGE,
        alias="REPORT_DEFAULT_MESSAGE",
        description="Message used when the caught error carries none.",
    )
    metadata: str = Field(
        default=REPORT_METADATA,
        alias="REPORT_METADATA",
        description="Tag identifying the schema/origin of generated reports.",
    )
    help_link: str | None = Field(default=None, alias="REPORT_HELP_LINK")
    session_header: str = Field(
        default="X-Session-ID",
        alias="REPORT_SESSION_HEADER",
        description="Request header read by the HTTP adapter to fill sessionId.",
    )
    include_request_body: bool = Field(
        default=False,
        alias="REPORT_INCLUDE_REQUEST_BODY",
        description="Copy the raw request body into reports built by the HTTP adapter.",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("application_name", "default_message", "metadata", mode="before")
    @classmethod
    def _strip_string(cls, value: str | None, info: ValidationInfo) -> str:
        if value is None:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must be provided.")
        trimmed = str(value).strip()
        if not trimmed:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must not be empty.")
        return trimmed

    @field_validator("help_link")
    @classmethod
    def _normalize_help_link(cls, value: str | None) -> str | None:
        if value is None:
            return None
        candidate = value.strip()
        return candidate or None


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance so configuration is evaluated once."""
    return Settings()


__all__ = ["DEFAULT_ERROR_MESSAGE", "REPORT_METADATA", "Settings", "get_settings"]
