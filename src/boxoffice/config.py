"""Client configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Booking backend
    api_base_url: str = "http://localhost:8080/api"
    api_token: str = ""
    api_timeout: float = 15.0

    # Seat selection
    poll_interval_seconds: int = 10
    hold_duration_seconds: int = 600
    countdown_tick_seconds: int = 1
    max_selected_seats: int = 10
    session_storage_key: str = "seat-session-id"

    # Pricing
    convenience_fee_rate: float = 0.05
    gst_rate: float = 0.18


# Global settings instance
settings = Settings()
