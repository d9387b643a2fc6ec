"""FastAPI application factory."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from construction_dna import __version__
from web.config import WebConfig
from web.dependencies import get_engine_service, shutdown_engine_service
from web.routers import ask, compatibility, health, materials

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Warm up the engine on startup; shut it down on stop."""
    get_engine_service()
    yield
    shutdown_engine_service()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="ConstructionDNA API",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(GZipMiddleware, minimum_size=500)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=WebConfig.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health.router, prefix="/api/v1")
    application.include_router(ask.router, prefix="/api/v1")
    application.include_router(materials.router, prefix="/api/v1")
    application.include_router(compatibility.router, prefix="/api/v1")
    return application


app = create_app()
