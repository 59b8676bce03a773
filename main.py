import logging
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from friendbook.config import get_settings
from friendbook.infrastructure.database import engine, initialize_database
from friendbook.infrastructure.notifications import ConnectionRegistry, EventDispatcher
from friendbook.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the database schema and the realtime registry; tear both down on exit."""

    initialize_database()
    registry = ConnectionRegistry()
    dispatcher = EventDispatcher(registry)
    app.state.connection_registry = registry
    app.state.event_dispatcher = dispatcher
    logger.info("Realtime notification registry started")
    try:
        yield
    finally:
        with anyio.move_on_after(SHUTDOWN_GRACE_SECONDS):
            await dispatcher.join()
        if dispatcher.pending_count:
            logger.warning(
                "Dropping %d realtime pushes still in flight at shutdown",
                dispatcher.pending_count,
            )
        await registry.close_all()
        engine.dispose()
        logger.info("Realtime notification registry stopped")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """Create and configure the main FastAPI application."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Friendbook", lifespan=lifespan)

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_routes(app)
    return app


app = create_app()
