"""
marketplace/config.py - Application configuration and logging setup.

Settings are loaded from the environment (or a local `.env` file) through
pydantic-settings. Other modules import `settings` from here.
"""
import logging
import sys
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/marketplace_db"
    sql_echo: bool = False
    create_tables_on_startup: bool = True

    jwt_secret: str = "supersecretkey"  # override in every real deployment
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    allowed_origins: str = "*"  # comma-separated list or '*'
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def origins(self) -> List[str]:
        if not self.allowed_origins or self.allowed_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()


def configure_logging() -> None:
    """Attach a stdout handler to the root logger once."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # SQL statements are controlled by SQL_ECHO, keep the rest of the driver quiet
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
