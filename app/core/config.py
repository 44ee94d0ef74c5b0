"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Word Count Tracker"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./wordcount.db"

    # Session cookie signing
    secret_key: str = "change-me-in-production-use-env"
    session_cookie_name: str = "wct_session"
    session_max_age: int = 60 * 60 * 8  # 8 hours

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    # Presentation fallbacks when a project has no active goal
    default_target_words: int = 50000
    default_daily_target: int = 1000

    # First manager account, created on startup when there are no users
    initial_manager_username: str = "admin"
    initial_manager_password: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


# Base path for templates/static (parent of app/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
