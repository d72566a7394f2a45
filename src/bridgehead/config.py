"""
Centralized configuration.
Loads environment variables and defines global settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (where the .env lives)
# config.py -> bridgehead/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini
    gemini_api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("gemini_api_key", "vite_gemini_api_key"),
        description="Google Gemini API key",
    )
    gemini_model: str = Field(
        "gemini-2.5-flash",
        description="Standard model for geocoding, matching and quick ideas",
    )
    gemini_deep_model: str = Field(
        "gemini-2.5-pro", description="Higher-capability model for deep dive ideas"
    )
    gemini_chat_model: str = Field(
        "gemini-flash-lite-latest", description="Model for the assistant chat"
    )
    deep_dive_thinking_budget: int = Field(
        32768, ge=0, description="Thinking token budget for deep dive ideas"
    )

    # Upstream call policy
    ai_timeout_seconds: float = Field(
        60.0, gt=0, description="Timeout per generation attempt (seconds)"
    )
    ai_max_attempts: int = Field(
        3, ge=1, description="Attempts per generation, including the first"
    )
    ai_retry_max_wait: float = Field(
        8.0, ge=0, description="Upper bound of the jittered backoff (seconds)"
    )

    # Business ideas
    idea_demand_limit: int = Field(
        10, ge=0, description="Demands summarized into the idea prompt"
    )
    idea_rank_demands_by_upvotes: bool = Field(
        False, description="Sort demands by upvotes before truncating the summary"
    )

    # Posts REST API
    api_base_url: str = Field(
        "http://localhost:5001/api",
        validation_alias=AliasChoices("api_base_url", "vite_api_base_url"),
        description="Base URL of the Bridgehead REST API",
    )
    api_timeout_seconds: float = Field(
        5.0, gt=0, description="Timeout for REST API requests (seconds)"
    )

    # Logging
    log_level: str = Field("INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings."""
    return Settings()
