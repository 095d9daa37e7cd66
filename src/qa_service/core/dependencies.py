"""
FastAPI dependencies and store construction.

The store and settings are created once by the application lifespan and kept on
`app.state`; the dependencies below hand them to the routes.
"""

import logging
import uuid

from fastapi import Request

from qa_service.config.settings import Settings
from qa_service.database import check_connection, create_engine, create_session_factory
from qa_service.core.cors import forbidden_origin
from qa_service.repositories import BaseStore, InMemoryStore, SqlStore
from qa_service.services.moderation import ModerationClient, Moderator

logger = logging.getLogger(__name__)


async def build_store(settings: Settings, moderator: Moderator | None = None) -> tuple[BaseStore, object | None]:
    """
    Build the configured store.

    Returns the store and the engine to dispose on shutdown (None for the
    in-memory backend). For the relational backend the database is probed once;
    failure to connect propagates and aborts startup.
    """
    moderator = moderator or ModerationClient.from_settings(settings)
    options = {
        "default_page_size": settings.DEFAULT_PAGE_SIZE,
        "allow_client_ids": settings.ALLOW_CLIENT_IDS,
    }

    if settings.STORE_BACKEND == "postgres":
        engine = create_engine(settings)
        await check_connection(engine)
        logger.info("store.ready", extra={"backend": "sql"})
        return SqlStore(create_session_factory(engine), moderator, **options), engine

    if settings.QUESTIONS_SEED_FILE is not None:
        store = InMemoryStore.from_seed_file(settings.QUESTIONS_SEED_FILE, moderator, **options)
    else:
        store = InMemoryStore(moderator, **options)
    logger.info("store.ready", extra={"backend": "memory"})
    return store, None


def get_store(request: Request) -> BaseStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_request_id(request: Request) -> str:
    # RequestIDMiddleware sets this; the fallback only matters when it is not installed
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def enforce_origin(request: Request) -> None:
    """Reject cross-origin requests from origins outside CORS_ALLOW_ORIGINS."""
    origin = request.headers.get("origin")
    if origin is None:
        return
    allowed = request.app.state.settings.CORS_ALLOW_ORIGINS
    if "*" in allowed or origin in allowed:
        return
    raise forbidden_origin(origin)
