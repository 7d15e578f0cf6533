"""
Forge - Main Application
Habit store + analytics engine (streaks, consistency, momentum,
correlations, pillars, personal records) + focus sessions.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forge import __version__
from forge.analytics.calendar import local_now
from forge.api import analytics, focus, habits
from forge.api.deps import get_store
from forge.config import settings
from forge.db import create_db_and_tables, verify_database_connection

logger = logging.getLogger("forge")


def configure_logging():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    if settings.env != "prod":
        await create_db_and_tables()

    if settings.seed_sample_habits:
        await get_store().seed_sample_habits()

    logger.info("forge_online", extra={"env": settings.env, "version": __version__})
    yield
    logger.info("forge_shutdown")


app = FastAPI(
    title="Forge",
    description="Habit tracking with streak, consistency, momentum and correlation analytics",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {
        "message": "Forge is running",
        "docs": "/docs",
        "version": __version__,
        "timezone": settings.timezone,
    }


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/health/db")
async def database_health():
    status = await verify_database_connection()
    return {
        "status": "healthy" if status["database"] else "degraded",
        "database": status,
        "timestamp": local_now().isoformat(),
    }


app.include_router(habits.router)
app.include_router(analytics.router)
app.include_router(focus.router)
