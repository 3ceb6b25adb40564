"""Configuration management for the marine flooring record keeper."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_APPS_SCRIPT_URL = (
    "https://script.google.com/macros/s/"
    "AKfycbw8W_RzH1ktZ0xQIakbNww6RP23PiRl-X577_Eou7m7vRlrlWeUwlTnjgXIBksr8TIoEw/exec"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Apps Script backend
    sheet_script_url: str = Field(
        default=DEFAULT_APPS_SCRIPT_URL,
        description="Fallback Apps Script endpoint used when no override is stored locally",
    )

    # Durable local configuration (identity + endpoint override)
    local_config_path: str = Field(
        default="data/local_config.json",
        description="JSON file backing the durable key-value configuration",
    )

    # Reconciliation
    resync_delay_seconds: float = Field(
        default=3.0, description="Delay before a scheduled full resync after a mutation"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="production", description="Deployment environment name")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required setting is present, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The setting value

        Raises:
            ValueError: If the setting is None or empty
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

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # Script URL overrides must point at Apps Script
    SCRIPT_URL_PREFIX: str = "https://script.google.com"

    # Durable local config keys
    ACTIVE_FOREMAN_KEY: str = "active_foreman"
    SCRIPT_URL_KEY: str = "marine_flooring_script_url"

    # Fallback identity, always valid regardless of the Foremen sheet
    ADMIN_NAME: str = "Admin"
    ADMIN_PIN: str = "1234"

    # Foreman PINs
    PIN_LENGTH: int = 4

    # Dashboard
    RECENT_ACTIVITY_LIMIT: int = 6
    TREND_WEEKS: int = 12
    TOP_INSTALLERS: int = 6
    DEFAULT_VESSEL: str = "CVN74"

    # Toasts
    SYNC_FAILED_MESSAGE: str = "Sync failed: Please check your Google Script connection"
    UNCONFIRMED_MOVE_MESSAGE: str = "Sheet did not confirm the move"
    TOAST_HISTORY: int = 20

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
