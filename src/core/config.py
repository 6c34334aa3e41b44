"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Smart Task Manager API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    # Storage
    data_file: Path = Field(
        default=Path("tasks.json"),
        description="JSON file holding the whole task collection",
    )
    seed_sample_tasks: bool = Field(
        default=True,
        description="Write two sample tasks when no data file exists yet",
    )

    # Background jobs
    scheduler_enabled: bool = Field(
        default=True,
        description="Run the due-soon scan and recurrence jobs (disable for tests)",
    )
    due_soon_interval_seconds: float = Field(default=3600, gt=0)
    recurrence_interval_seconds: float = Field(default=86400, gt=0)
    due_soon_window_hours: float = Field(default=24, gt=0)
    recurrence_skip_regenerated: bool = Field(
        default=False,
        description=(
            "Skip completed recurring tasks that already have an open successor. "
            "Off by default: every run regenerates every completed recurring task."
        ),
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )
    rate_limit_read: str = Field(default="60/minute")
    rate_limit_write: str = Field(default="30/minute")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:5500",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
