"""Application settings and validation."""

import os
from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import URL

BASE = Path(__file__).resolve().parent.parent

SUPPORTED_DIALECTS = ("sqlite", "mysql")


def _bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    APP_ENV: str
    HOST: str
    PORT: int
    AUTO_LISTEN: bool
    DB_DIALECT: str
    DB_STORAGE: str
    DB_HOST: str
    DB_PORT: int
    DB_NAME: str
    DB_USER: str
    DB_PASS: str
    DB_ECHO: bool
    STATIC_DIR: Path
    LOG_LEVEL: str
    LOG_FILE_ENABLED: bool
    LOG_FILE: Path
    ALLOW_DEV_CORS: bool

    def __init__(self):
        self.APP_ENV = os.getenv("APP_ENV", "development").lower()
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "3000"))
        self.AUTO_LISTEN = _bool(os.getenv("AUTO_LISTEN", "true"))
        default_dialect = "sqlite" if self.APP_ENV == "test" else "mysql"
        self.DB_DIALECT = os.getenv("DB_DIALECT", default_dialect).lower()
        self.DB_STORAGE = os.getenv("DB_STORAGE", ":memory:")
        self.DB_HOST = os.getenv("DB_HOST", "localhost")
        self.DB_PORT = int(os.getenv("DB_PORT", "3306"))
        self.DB_NAME = os.getenv("DB_NAME", "school_fees_db")
        self.DB_USER = os.getenv("DB_USER", "root")
        self.DB_PASS = os.getenv("DB_PASS", "")
        self.DB_ECHO = _bool(os.getenv("DB_ECHO", "false"))
        self.STATIC_DIR = Path(os.getenv("STATIC_DIR", str(BASE / "public")))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FILE_ENABLED = _bool(os.getenv("LOG_FILE_ENABLED", "false"))
        self.LOG_FILE = Path(os.getenv("LOG_FILE", str(BASE / "logs" / "application.log")))
        self.ALLOW_DEV_CORS = _bool(os.getenv("ALLOW_DEV_CORS", "true"))
        self._validate()

    def _validate(self):
        if self.DB_DIALECT not in SUPPORTED_DIALECTS:
            raise RuntimeError(f"DB_DIALECT must be one of {', '.join(SUPPORTED_DIALECTS)}, got {self.DB_DIALECT!r}")
        if not 0 < self.PORT < 65536:
            raise RuntimeError(f"PORT must be between 1 and 65535, got {self.PORT}")

    @property
    def is_test(self) -> bool:
        return self.APP_ENV == "test"

    @property
    def is_memory_db(self) -> bool:
        return self.DB_DIALECT == "sqlite" and self.DB_STORAGE == ":memory:"

    def database_url(self) -> URL:
        """Build the SQLAlchemy URL for the configured backend."""
        if self.DB_DIALECT == "sqlite":
            return URL.create("sqlite", database=None if self.is_memory_db else self.DB_STORAGE)
        return URL.create(
            "mysql+mysqlconnector",
            username=self.DB_USER,
            password=self.DB_PASS or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings read from the environment."""
    return Settings()
