from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 2048

    # Admission control for the AI endpoints
    rate_limit_requests: int = 50
    rate_limit_window_seconds: int = 3600

    # Slot finder defaults
    slot_horizon_days: int = 15
    slot_interval_minutes: int = 30
    work_start: str = "09:00"
    work_end: str = "17:00"
    exclude_weekends: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
