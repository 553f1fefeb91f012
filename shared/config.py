"""
Application settings and logging setup.

Settings come from the environment (prefix RESTAURANT_) or an optional
.env file. Defaults are good enough to run the demo and the tests.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class Settings(BaseSettings):
    """
    Centralized settings.

    Optional env vars:
      - RESTAURANT_ENVIRONMENT (development | test | production)
      - RESTAURANT_LOG_LEVEL
      - RESTAURANT_DATA_DIR (JSON fixtures)
      - RESTAURANT_PAGE_SIZE (feed page length)
      - RESTAURANT_API_BASE_URL (used by the HTTP client)
    """

    environment: str = "development"
    log_level: str = "INFO"
    data_dir: Path = Path(__file__).parent.parent / "data"
    page_size: int = 10
    max_page_size: int = 100
    api_base_url: str = "http://127.0.0.1:8000"

    model_config = SettingsConfigDict(
        env_prefix="RESTAURANT_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure the root logger once, using the settings' level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.environment == "test" else settings.log_level.upper()
    if not logging.root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger("config").debug(f"Logging configured for {settings.environment}")
