# src/repo_dashboard/config.py
"""
Application configuration.

Values come from the environment or a local `.env` file.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # GitHub
    GITHUB_TOKEN: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT: float = 30.0
    GITHUB_MAX_RETRIES: int = 3

    # Storage
    DATA_DIR: Path = Path.home() / ".repo-dashboard"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    # Extra pattern tables (YAML), merged over the built-in ones
    TECH_PATTERNS_FILE: Optional[Path] = None
    THEME_PATTERNS_FILE: Optional[Path] = None

    @property
    def store_path(self):
        return self.DATA_DIR / "repositories.json"


@lru_cache()
def get_settings():
    return Settings()
