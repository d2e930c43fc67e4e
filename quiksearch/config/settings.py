"""Application settings and configuration management."""

from functools import lru_cache

from pydantic import Field, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Search settings with environment variable support."""

    # Application
    app_name: str = Field(default="quiksearch")
    app_version: str = Field(default="1.0.0")

    # Search defaults
    default_mode: str = Field(default="fuzzy")
    default_fuzz: int = Field(default=3, ge=0)
    default_depth: int = Field(default=8, ge=0)
    max_results: int = Field(default=0, ge=0)  # 0 = unlimited

    # Caps applied to caller-supplied parameters
    max_fuzz: int = Field(default=8, ge=0)
    max_depth: int = Field(default=64, ge=0)

    # Fuzzy search bounds
    max_restarts: int = Field(default=3, ge=0)
    max_states: int = Field(default=200000, ge=1)
    constrain_restarts: bool = Field(default=False)

    # Indexing
    index_words: bool = Field(default=True)

    # Suggestions for queries without results
    max_suggestions: int = Field(default=5, ge=0)
    suggestion_cutoff: float = Field(default=60.0, ge=0.0, le=100.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    model_config = ConfigDict(
        env_prefix="QUIKSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
