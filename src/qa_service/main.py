"""
Application factory.

    uvicorn qa_service.main:create_app --factory

`create_app()` wires logging, middleware, exception handlers and routes. The
store is built in the lifespan hook; an unreachable database in the relational
configuration aborts startup.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from qa_service.api.v1 import register_exception_handlers, router
from qa_service.config.settings import Settings, get_settings
from qa_service.core.cors import QACORSMiddleware
from qa_service.core.dependencies import build_store
from qa_service.core.logging import RequestIDMiddleware, setup_logging
from qa_service.repositories import BaseStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: BaseStore | None = None) -> FastAPI:
    """
    Args:
        settings: defaults to get_settings().
        store: a ready store (tests). When omitted the lifespan builds one from settings.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if store is None:
            app.state.store, engine = await build_store(settings)
        logger.info("app.startup", extra={"env": settings.ENV, "backend": app.state.store.backend})
        try:
            yield
        finally:
            await app.state.store.close()
            if engine is not None:
                await engine.dispose()
            logger.info("app.shutdown")

    app = FastAPI(title="qa-service", lifespan=lifespan)
    app.state.settings = settings
    if store is not None:
        app.state.store = store

    app.add_middleware(
        QACORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["content-type", "x-request-id"],
    )
    # added last so it runs first and every log line of the request carries the id
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    app.include_router(router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "qa_service.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
