import os
import logging
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _default_database_url() -> str:
    url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./reviews.db")
    # The record store runs on SQLAlchemy's asyncio extension
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


class Config(BaseModel):
    app_name: str = "Performance Review Portal"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"
    user_id_header: str = "X-User-ID"

    # Database
    database_url: str = Field(default_factory=_default_database_url)
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() == "true"

    # Review cycle
    review_cycle: str = os.getenv("REVIEW_CYCLE", str(datetime.now(timezone.utc).year))
    seed_default_catalog: bool = os.getenv("SEED_DEFAULT_CATALOG", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )


settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("Running in production against SQLite; set DATABASE_URL to a PostgreSQL instance.")
