from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase


class Settings(BaseSettings):
    """
    Application settings loaded from the environment (and an optional .env file).

    Every field has a default, so the service starts with the in-memory store and
    no configuration at all. Switching to the relational store only needs
    STORE_BACKEND=postgres plus the POSTGRES_* parts.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3030

    # Persistence backend
    STORE_BACKEND: Literal["memory", "postgres"] = "memory"
    QUESTIONS_SEED_FILE: Path | None = None

    # Database configuration
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "qa_service"

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: float = 5.0

    # Moderation service
    MODERATION_URL: str = "https://api.apilayer.com/bad_words"
    # Required by the default endpoint, which answers 401 without it
    MODERATION_API_KEY: str | None = None
    MODERATION_TIMEOUT: float = 10.0
    MODERATION_CENSOR_CHARACTER: str = "*"

    # Request behaviour
    DEFAULT_PAGE_SIZE: int = 10
    PAGINATION_STYLE: Literal["offset", "range"] = "offset"
    ALLOW_CLIENT_IDS: bool = False
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/qa_service")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        With `TESTING=True` and `TEST_POSTGRES_DB` set, the URL points at the test
        database so a test run can never touch the regular one.
        """
        database = self.TEST_POSTGRES_DB if (self.TESTING and self.TEST_POSTGRES_DB) else self.POSTGRES_DB
        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{database}"
        )

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """Logging expects upper-case level names ("DEBUG", "INFO", ...)."""
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", "STORE_BACKEND", "PAGINATION_STYLE", mode="before")
    def normalize_choice(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    @field_validator("DEFAULT_PAGE_SIZE")
    def positive_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DEFAULT_PAGE_SIZE must be at least 1")
        return v

    model_config = SettingsConfigDict(
        # .env next to the package root (src/qa_service/.env)
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings are read from the environment once per process.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
