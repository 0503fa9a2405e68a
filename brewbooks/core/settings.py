"""Configuration and environment settings for BrewBooks."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for BrewBooks."""

    app_name: str = "BrewBooks"
    database_url: str = "sqlite:///brewbooks.db"
    api_prefix: str = ""
    frontend_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"
    log_file: str = "logs/brewbooks.log"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> "Settings":
    """Return an instance of the application settings."""
    return Settings()
