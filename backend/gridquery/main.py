"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from sqlalchemy import text

from gridquery.config import get_settings
from gridquery.db.session import get_sessionmaker
from gridquery.mapping.estates import demo_mappers
from gridquery.routers import estates, seed

logger = logging.getLogger(__name__)


async def _warm_backend_state() -> None:
    """Prime the DB connection at process start."""

    try:
        async with get_sessionmaker()() as db:
            await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Backend warm-up failed; continuing without startup pre-warm.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    await _warm_backend_state()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    application.state.mapper_registry = demo_mappers.build()

    application.include_router(estates.router, tags=["estates"])
    application.include_router(seed.router, tags=["seed"])

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""

        return {"status": "ok"}

    return application


app = create_app()
