"""FastAPI application factory.

Main entry point for the QuoteMemory Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotememory import __version__
from quotememory.db.database import get_db_path, init_db
from quotememory.web.routes import (
    health_router,
    practice_router,
    quotes_router,
    subscription_router,
)
from quotememory.web.sessions import get_session_manager

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    db_path = get_db_path()
    init_db(db_path)
    logger.info("api_startup", db_path=str(db_path.absolute()))
    yield
    # Shutdown: stop any running countdowns
    await get_session_manager().close_all()
    logger.info("api_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="QuoteMemory API",
        description="Store quotes and practice recalling them",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(quotes_router)
    app.include_router(practice_router)
    app.include_router(subscription_router)

    return app


# Default app instance for uvicorn
app = create_app()
