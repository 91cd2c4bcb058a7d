"""
Configuration module - loads settings from environment variables / .env file.
"""
import json
import logging
from functools import lru_cache
from typing import List, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings
from pydantic import Field, model_validator, field_validator

from beaverdoc.utils.datetime_utils import SUPPORTED_LOCALES

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings."""

    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # CORS
    allowed_origins: List[str] = Field(default=[], alias="ALLOWED_ORIGINS")

    # Uploads
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        alias="MAX_UPLOAD_BYTES",
        description="Largest accepted upload (default 10 MB)"
    )

    # Footer stamp
    product_label: str = Field(default="BeaverDoc", alias="PRODUCT_LABEL")
    stamp_locale: str = Field(
        default="fr",
        alias="STAMP_LOCALE",
        description="Locale used to render the signing timestamp in footers"
    )
    stamp_timezone: str = Field(default="Europe/Paris", alias="STAMP_TIMEZONE")

    # Demo actor (no authentication in this service)
    demo_user_id: int = Field(default=1, alias="DEMO_USER_ID")
    demo_user_code: str = Field(default="0042", alias="DEMO_USER_CODE")
    demo_company_code: str = Field(default="7890", alias="DEMO_COMPANY_CODE")

    @field_validator("allowed_origins", mode='before')
    @classmethod
    def _parse_allowed_origins(cls, v: Any) -> List[str]:
        """Parse ALLOWED_ORIGINS from JSON list, CSV, semicolon-separated string, or list."""
        if v is None:
            return []
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    return json.loads(s)
                except json.JSONDecodeError:
                    pass  # Fall through to delimiter parsing
            parts = [p.strip() for p in s.replace(",", ";").split(";")]
            return [p for p in parts if p]
        return []

    @field_validator("stamp_locale")
    @classmethod
    def _validate_stamp_locale(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SUPPORTED_LOCALES:
            raise ValueError(
                f"Unsupported STAMP_LOCALE '{v}', expected one of {sorted(SUPPORTED_LOCALES)}"
            )
        return v

    @field_validator("stamp_timezone")
    @classmethod
    def _validate_stamp_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown STAMP_TIMEZONE '{v}'")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @model_validator(mode='after')
    def validate_limits(self) -> 'Settings':
        """Sanity-check upload limits for the environment."""
        if self.max_upload_bytes <= 0:
            raise ValueError("MAX_UPLOAD_BYTES must be positive")

        if self.environment == "production" and self.debug:
            logger.warning(
                "Configuration Warning: DEBUG is enabled in a 'production' environment."
            )

        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# =============================================================================
# CORS Configuration
# =============================================================================

# Development origins (only in non-production)
DEV_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]


def get_cors_origins() -> List[str]:
    """
    Get list of allowed CORS origins.

    Combines origins from ALLOWED_ORIGINS with the development origins
    (the latter only outside production).
    """
    settings = get_settings()
    origins = set(settings.allowed_origins)

    if settings.environment != "production":
        origins.update(DEV_CORS_ORIGINS)

    return sorted(origins)


def is_allowed_origin(origin: str) -> bool:
    """Check if an origin is allowed for CORS."""
    if not origin:
        return False

    if origin in get_cors_origins():
        return True

    settings = get_settings()
    if settings.environment != "production":
        if origin.startswith("http://localhost:") or origin.startswith("http://127.0.0.1:"):
            return True

    return False
