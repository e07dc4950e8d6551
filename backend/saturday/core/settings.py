from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, DotEnvSettingsSource, EnvSettingsSource, SettingsConfigDict

logger = logging.getLogger(__name__)

_DEFAULT_ORIGINS = [
    "http://localhost",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


class _FallbackEnvSettingsSource(EnvSettingsSource):
    """Allow ALLOW_ORIGINS to be comma-separated instead of strict JSON."""

    def decode_complex_value(self, field_name, field, value):  # type: ignore[override]
        try:
            return super().decode_complex_value(field_name, field, value)
        except json.JSONDecodeError:
            if field_name == "allow_origins":
                return value
            raise


class _FallbackDotEnvSettingsSource(DotEnvSettingsSource):
    """Allow ALLOW_ORIGINS to be comma-separated instead of strict JSON."""

    def decode_complex_value(self, field_name, field, value):  # type: ignore[override]
        try:
            return super().decode_complex_value(field_name, field, value)
        except json.JSONDecodeError:
            if field_name == "allow_origins":
                return value
            raise


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    project_name: str = "Saturday API"
    project_version: str = "1.0.0"
    environment: str = Field(
        default="development",
        description="Deployment environment name",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT"),
    )
    git_sha: str | None = Field(default=None, description="Git SHA for /version")
    build_version: str | None = Field(default=None, description="Build identifier")
    log_level: str = Field(default="INFO", description="Logging level")

    # Database
    database_url: str = Field(
        default="sqlite:///./saturday.db",
        description="SQLAlchemy database URL",
    )

    # Auth / JWT
    session_secret: str = Field(
        ...,
        min_length=1,
        description="JWT signing secret; the process refuses to start without it",
        validation_alias=AliasChoices("SESSION_SECRET", "JWT_SECRET"),
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        gt=0,
        description="Token and auth cookie lifetime in minutes",
    )
    auth_cookie_name: str = Field(default="auth_token", description="Name of the session cookie")
    cookie_secure: Optional[bool] = Field(
        default=None,
        description="Force the Secure cookie flag; unset means follow the request scheme",
    )
    login_max_attempts: int = Field(default=10, description="Login attempts allowed per window")
    login_window_minutes: int = Field(default=15, description="Login rate limit window in minutes")

    # Calendar
    availability_window_months: int = Field(
        default=3,
        gt=0,
        description="Months of upcoming Saturdays returned when no range is given",
    )

    # CORS / proxies
    allow_origins: List[str] = Field(default_factory=lambda: list(_DEFAULT_ORIGINS))
    trusted_proxy_hosts: str = Field(
        default="127.0.0.1",
        description="Hosts whose X-Forwarded-* headers are trusted",
    )

    @field_validator("allow_origins", mode="before")
    @classmethod
    def parse_allow_origins(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, list):
            return value
        if isinstance(value, str) and value.strip():
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return list(_DEFAULT_ORIGINS)

    @field_validator("session_secret")
    @classmethod
    def reject_blank_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("SESSION_SECRET must not be blank")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def access_token_max_age_seconds(self) -> int:
        return self.access_token_expire_minutes * 60

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            _FallbackEnvSettingsSource(settings_cls),
            _FallbackDotEnvSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings() -> Settings:
    """Build settings or stop the process.

    A missing SESSION_SECRET is a fatal startup condition; there is no
    fallback secret.
    """
    try:
        return Settings()
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
        logger.critical(
            "Invalid configuration, refusing to start (fields: %s). "
            "SESSION_SECRET must be set to a strong random value.",
            ", ".join(fields),
        )
        raise SystemExit(1) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


settings = get_settings()
