"""Application settings for Taskboard.

Values come from the environment (a local .env file is honoured).
"""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime configuration read once from environment variables."""

    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")
        self.sql_echo = _as_bool(os.getenv("SQL_ECHO"))
        self.access_token_expire_minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
        self.max_image_bytes = int(os.getenv("MAX_IMAGE_BYTES", str(2 * 1024 * 1024)))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cookie_secure = _as_bool(os.getenv("COOKIE_SECURE"))
        self._secret_key = os.getenv("TASKBOARD_SECRET")

    @property
    def secret_key(self) -> str:
        if self._secret_key is None:
            raise ValueError("TASKBOARD_SECRET environment variable is not set for JWT.")
        return self._secret_key


@lru_cache
def get_settings() -> Settings:
    return Settings()
