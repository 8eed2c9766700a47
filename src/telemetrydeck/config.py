"""Configuration management using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://nom.telemetrydeck.com/v2/"
DEFAULT_TIMEOUT_SECONDS = 5.0


class Settings(BaseSettings):
    """Client settings loaded from ``TELEMETRYDECK_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TELEMETRYDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required to send anything; validated when the client is built
    app_id: str = ""

    # Ingestion
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    # Identity
    hash_salt: str = ""
    user_id: str | None = None
    session_id: str | None = None

    test_mode: bool = False
