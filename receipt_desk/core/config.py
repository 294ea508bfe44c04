# receipt_desk/core/config.py
"""
Application settings.

Every value can be overridden with an environment variable of the same name
or through a ``.env`` file in the working directory.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Receipt Desk API"
    VERSION: str = "0.1.0"

    # "sqlite://" is an in-memory database that lives as long as the process
    DATABASE_URL: str = Field(default="sqlite://")
    SEED_SAMPLE_DATA: bool = Field(default=True)

    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])


@lru_cache
def get_settings() -> Settings:
    return Settings()
