"""
Service configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    database_name: str = "exist_db"

    # Multi-document transactions need a replica set; disable for standalone servers
    use_transactions: bool = True

    # Startup trigger parameters, e.g. TRIGGER_PARAMETERS='{"xquery": ["/db/init.xq"]}'
    trigger_parameters: dict[str, list[Any]] = Field(default_factory=dict)

    # Query runtime factory as "package.module:attribute"
    query_service: Optional[str] = None

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
