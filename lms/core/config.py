"""Application settings loaded from the environment (and an optional .env file)."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "School LMS"
    environment: str = "development"  # development, test, production

    database_url: str = "sqlite:///./lms.db"

    # JWT
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Logging
    log_level: str = "INFO"
    log_dir: str | None = None

    cors_origins: list[str] = ["http://localhost:3000"]

    # Resources uploaded within this many seconds of a group anchor are shown together
    resource_group_window_seconds: int = 300

    progress_rate_limit: str = "60/minute"


settings = Settings()
