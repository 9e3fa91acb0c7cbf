"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "job_tracker"

    # OpenAI-compatible completion API
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    analysis_primary_model: str = "gpt-3.5-turbo-16k"
    analysis_fallback_model: str = "gpt-3.5-turbo"
    analysis_temperature: float = 0.3
    # No timeout unless configured
    openai_timeout_seconds: Optional[float] = None

    # Resume storage
    resume_storage: Literal["gridfs", "filesystem"] = "gridfs"
    upload_dir: str = "uploads"
    max_upload_mb: int = 5
    resume_excerpt_chars: int = 2000

    # JWT Auth (tokens are issued by the auth service, we only verify)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # App
    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"
    debug: bool = True

    @property
    def max_upload_bytes(self) -> int:
        """Upload ceiling in bytes"""
        return self.max_upload_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
