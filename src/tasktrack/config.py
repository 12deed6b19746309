"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    api_v1_prefix: str = "/api/v1"
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    rate_limit_enabled: bool = True

    # Public URL of the app, used as redirect target in verification/reset emails
    app_url: str = "http://localhost:5173"

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_anon_key: str = "test-anon-key"

    # Task storage
    tasks_table: str = "tasks"
    tasks_newest_first: bool = True

    # Local state (persisted session and task list)
    state_dir: Path = Path(".local/tasktrack")

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"


settings = Settings()
