"""
Configuration Management

Pydantic-settings based configuration for the patient reminder handlers.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reminders.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with REMINDERS_ and are case-insensitive.
    The database endpoint, service credential and default time of day also
    accept the unprefixed names used by the scheduled deployment:
    SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY and TIME_OF_DAY.
    """

    model_config = SettingsConfigDict(
        env_prefix="REMINDERS_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Database (Supabase / PostgREST) Configuration
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("REMINDERS_SUPABASE_URL", "SUPABASE_URL"),
        description="Base URL of the Supabase project",
    )
    supabase_service_role_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "REMINDERS_SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_SERVICE_ROLE_KEY"
        ),
        description="Service role key used for stored procedure calls",
    )
    rpc_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout for a single stored procedure call",
    )

    # Reminder Configuration
    default_time_of_day: str = Field(
        default="morning",
        validation_alias=AliasChoices("REMINDERS_DEFAULT_TIME_OF_DAY", "TIME_OF_DAY"),
        description="Mouthwash reminder slot used when the request names none",
    )
    follow_up_days_advance: int = Field(
        default=2,
        ge=0,
        description="Days ahead of the follow-up appointment to remind patients",
    )
    dispatch_max_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Concurrent notification calls per invocation (1 = sequential)",
    )

    # Push Delivery (SNS mobile push) Configuration
    push_platform_application_arn: str | None = Field(
        default=None,
        description="SNS platform application ARN for FCM; unset disables delivery",
    )
    sns_endpoint_url: str | None = Field(
        default=None,
        description="SNS endpoint URL (for local development)",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-west-2",
        description="AWS region",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("default_time_of_day")
    @classmethod
    def _strip_time_of_day(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("default_time_of_day must not be empty")
        return normalized

    @field_validator("supabase_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().rstrip("/") or None

    @property
    def push_enabled(self) -> bool:
        """Whether real push delivery is configured."""
        return bool(self.push_platform_application_arn)

    @property
    def sns_config(self) -> dict:
        """SNS client configuration."""
        config = {"region_name": self.aws_region}
        if self.sns_endpoint_url:
            config["endpoint_url"] = self.sns_endpoint_url
        return config

    def require_backend_credentials(self) -> tuple[str, str]:
        """
        Return the database URL and service key.

        Raises:
            ConfigurationError: If either value is missing
        """
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        key = (
            self.supabase_service_role_key.get_secret_value()
            if self.supabase_service_role_key
            else ""
        )
        if not key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                missing=missing,
            )
        return self.supabase_url, key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once per process.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
