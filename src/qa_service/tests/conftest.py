"""
Core pytest configuration for the entire test suite.

Only the shared setup lives here: logging, settings and the database engine.
Domain fixtures (moderator fakes, stores, sample payloads) are in
tests/test_fixtures/ and imported at the bottom of this module so every test
module can use them without importing.

Database selection:
  1. `TEST_DATABASE_URL` environment variable (CI override, e.g. a Postgres URL)
  2. `TESTING=true` + `TEST_POSTGRES_DB` in the environment
  3. a throwaway SQLite file per test (sqlite+aiosqlite)
"""

from __future__ import annotations

import os
import logging
from typing import AsyncGenerator
from urllib.parse import urlparse

NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "httpx",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)


import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from qa_service.config.settings import Settings
from qa_service.core.logging.builder import setup_logging
from qa_service.database import create_engine, create_schema, create_session_factory, drop_schema

logger = logging.getLogger(__name__)


def make_settings(**overrides) -> Settings:
    """Settings isolated from any local .env file."""
    values = {
        "ENV": "testing",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_STDOUT": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install application logging for the whole session.

    caplog attaches its handler per test, after this runs, so `caplog.records`
    still sees every record.
    """
    setup_logging(make_settings())
    yield


@pytest.fixture
def settings() -> Settings:
    return make_settings()


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url(tmp_path) -> str:
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    env_settings = Settings()
    if env_settings.TESTING and env_settings.TEST_POSTGRES_DB:
        return env_settings.DATABASE_URL

    return f"sqlite+aiosqlite:///{tmp_path / 'test_database.db'}"


@pytest.fixture
async def async_engine(tmp_path, settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    url = get_test_database_url(tmp_path)
    logger.info("Using test DB: %s", safe_log_db_url(url))

    engine = create_engine(settings, url=url)
    await drop_schema(engine)
    await create_schema(engine)

    yield engine

    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(async_engine)


from .test_fixtures.store_fixtures import (  # noqa: E402,F401
    FakeModerator,
    moderator,
    memory_store,
    sql_store,
    store,
    question_draft,
)
from .test_fixtures.api_fixtures import app, client  # noqa: E402,F401
