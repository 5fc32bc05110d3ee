import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_DATABASE_URL = "sqlite:///./users.db"

_TRUTHY = ("true", "1", "yes")


class Settings(BaseModel):
    """Process configuration, read once by whichever entry point composes the app"""

    model_config = ConfigDict(frozen=True)

    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = []


def load_settings() -> Settings:
    """Load settings from a ``.env`` file (if any) and the environment"""
    load_dotenv()

    extra_origins = os.getenv("CORS_ORIGINS", "")
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        sql_echo=os.getenv("SQL_ECHO", "false").lower() in _TRUTHY,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=[o.strip() for o in extra_origins.split(",") if o.strip()],
    )
