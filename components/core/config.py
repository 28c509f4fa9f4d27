from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings

from components.jalali.adapter import DateFormatConfig


class Settings(BaseSettings):
    # Database settings
    DB_URL: str = "sqlite+aiosqlite:///./finance.db"
    SQLITE_PRAGMAS: bool = True  # Apply WAL/foreign key pragmas on startup

    # API settings
    API_VERSION: str = "v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Calendar settings
    TIMEZONE: str = "Asia/Tehran"
    PERSIAN_DIGITS: bool = False
    DEFAULT_MONTHS_BACK: int = 6

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        validate_default = True

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.DB_URL.startswith("sqlite")

    @property
    def date_format(self) -> DateFormatConfig:
        """Calendar configuration handed to the Jalali date adapter."""
        return DateFormatConfig(timezone=self.TIMEZONE, persian_digits=self.PERSIAN_DIGITS)


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance to avoid reloading .env file on every access
    """
    return Settings()


settings = get_settings()
