"""
Exercise Tracker API

FastAPI application wiring: logging, error handling, rate limiting and
routers.

Run:
    uvicorn tutor.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutor.config import settings, yaml_config
from tutor.db.base import init_db
from tutor.middleware.error_handling import setup_error_handling
from tutor.middleware.rate_limit import setup_rate_limiting
from tutor.routers import exercises, health, progress

log_config = yaml_config.get("logging", {})
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else log_config.get("level", "INFO"),
    format=log_config.get("format", "%(asctime)s %(levelname)s [%(name)s] %(message)s"),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} (max attempts={settings.MAX_ATTEMPTS})")
    if settings.DEBUG:
        # Production schemas come from Alembic
        await init_db()
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_error_handling(app, debug=settings.DEBUG)
    setup_rate_limiting(app, enabled=settings.RATE_LIMIT_ENABLED)

    app.include_router(health.router)
    app.include_router(exercises.router)
    app.include_router(progress.router)

    return app


app = create_app()
