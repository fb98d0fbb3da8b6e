"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration.

    Values are read from environment variables (or a `.env` file).
    """

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str
    supabase_http_max_connections: int = 20
    supabase_http_max_keepalive_connections: int = 10
    supabase_postgrest_timeout_seconds: int = 30

    # App
    app_name: str = "Pocket Money API"
    app_version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:5173"
    slow_request_log_threshold_ms: int = 0
    storage_backend: Literal["supabase", "memory"] = "supabase"

    # Account
    child_name: str = "Louis"
    default_weekly_allowance: float = 10.0
    default_interest_rate: float = 0.01
    transaction_history_limit: int = 20

    # Scheduling
    enable_scheduler: bool = False
    timezone: str = "UTC"
    weekly_allowance_cron_day_of_week: str = "mon"
    weekly_allowance_cron_hour: int = 7
    monthly_interest_cron_day: int = 1
    monthly_interest_cron_hour: int = 7

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def origins_list(self) -> list[str]:
        """Parse comma-separated ALLOWED_ORIGINS into a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()  # type: ignore[call-arg]
