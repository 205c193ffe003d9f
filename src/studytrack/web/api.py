"""FastAPI application factory.

Main entry point for the StudyTrack Web API.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studytrack import __version__
from studytrack.config.app_config import AppConfig, load_app_config
from studytrack.db.database import Database
from studytrack.web.errors import register_error_handlers
from studytrack.web.routes import (
    activity_router,
    articles_router,
    auth_router,
    bookmarks_router,
    health_router,
    notes_router,
    progress_router,
    questions_router,
    quiz_router,
    search_router,
    subjects_router,
    topics_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the store on startup; it is released with the app."""
    config: AppConfig = app.state.config
    db = Database(config.database.path, timeout=config.database.busy_timeout_seconds)
    db.init_schema()
    app.state.db = db

    logger.info("api_startup", db_path=str(db.path.absolute()), version=__version__)
    yield
    logger.info("api_shutdown")


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to run with; loaded from the config file when None

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="StudyTrack API",
        description="Syllabus, practice questions and personal study tracking",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config or load_app_config()

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(subjects_router)
    app.include_router(topics_router)
    app.include_router(articles_router)
    app.include_router(questions_router)
    app.include_router(bookmarks_router)
    app.include_router(notes_router)
    app.include_router(progress_router)
    app.include_router(quiz_router)
    app.include_router(activity_router)
    app.include_router(search_router)

    return app


# Default app instance for uvicorn
app = create_app()
