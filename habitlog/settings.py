from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILES = [PROJECT_ROOT / ".env", ".env"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, extra="ignore")

    # DB
    DATABASE_URL: str = "sqlite:///./data/habitlog.db"

    # App
    TIMEZONE: str = "UTC"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Demo user (single-user app)
    DEMO_USER_EMAIL: str = "demo@example.com"
    DEMO_USER_NAME: str = "Demo User"

    # Views
    HEATMAP_DEFAULT_MONTHS: int = 3
    ENTRIES_PAGE_LIMIT: int = 50


settings = Settings()
