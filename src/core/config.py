"""Configuration management for the household scheduling core."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    # Due-soon horizons per entity kind
    event_due_soon_days: int = Field(default=7, ge=0, description="Due-soon horizon for calendar events (days)")
    chore_due_soon_days: int = Field(default=7, ge=0, description="Due-soon horizon for chores and cleaning (days)")
    vaccine_due_soon_days: int = Field(default=30, ge=0, description="Due-soon horizon for pet vaccines (days)")
    reminder_due_soon_hours: int = Field(
        default=24, ge=0, description="Due-soon horizon for personal reminders (hours)"
    )

    # Family Configuration
    default_max_members: int = Field(default=10, ge=2, le=20, description="Member limit for new families")
    invite_code_max_attempts: int = Field(
        default=10, ge=1, description="Attempts before invite code generation gives up"
    )

    # Reminders
    default_snooze_minutes: int = Field(default=15, ge=1, description="Snooze length when none is given")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # Invite Codes
    INVITE_CODE_BYTES: int = 4
    INVITE_CODE_LENGTH: int = 8  # 2 hex characters per byte
    INVITE_CODE_PATTERN: str = r"[0-9A-F]{8}"

    # Family Limits
    MIN_MAX_MEMBERS: int = 2
    MAX_MAX_MEMBERS: int = 20
    MAX_FAMILY_NAME_LENGTH: int = 50
    MAX_FAMILY_DESCRIPTION_LENGTH: int = 200

    # Recurrence
    DAYS_PER_WEEK: int = 7
    BIWEEKLY_DAYS: int = 14
    MONTHS_PER_QUARTER: int = 3
    MAX_OCCURRENCE_EXPANSION: int = 1000  # Upper bound for occurrence iteration


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
