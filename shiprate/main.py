"""ShipRate-Cache FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shiprate import __version__
from shiprate.api import cache
from shiprate.config import get_settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="Shipping rate quote cache keyed on normalized cart facts",
    lifespan=lifespan,
)

app.include_router(cache.router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "service": settings.app_name, "version": __version__}
