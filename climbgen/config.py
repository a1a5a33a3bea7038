"""Application configuration settings."""
import os
import json
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Service settings, read from the environment and an optional .env file."""

    # App settings
    app_name: str = "Climbing Level Generator"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Comma-separated list or JSON array
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Largest batch a single generate/export request may ask for
    max_batch_size: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("max_batch_size")
    @classmethod
    def positive_batch_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_batch_size must be at least 1")
        return value

    def get_cors_origins(self) -> List[str]:
        """Allowed CORS origins as a list."""
        raw = self.cors_origins.strip()
        if not raw:
            return []
        if raw.startswith("["):
            try:
                origins = json.loads(raw)
            except json.JSONDecodeError:
                origins = None
            if isinstance(origins, list):
                return [str(origin) for origin in origins]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance (re-read on every call when DEBUG=true)."""
    global _settings
    if _settings is None or os.getenv("DEBUG", "false").lower() == "true":
        _settings = Settings()
    return _settings
