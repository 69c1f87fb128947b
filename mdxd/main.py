"""Main FastAPI application for mdxd daemon.

This module creates and configures the FastAPI application that exposes
mdx_library builds via REST API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mdx_library.config import BuildSettings
from mdx_library.config import load_config

from . import __version__
from .routers import build_router
from .routers import cache_router
from .routers import status_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Args:
        app: FastAPI application instance
    """
    config = load_config()
    logging.getLogger().setLevel(config.log_level.upper())
    logger.info(f"Starting mdxd daemon on {config.host}:{config.port} ({config.environment})")

    yield

    logger.info("Shutting down mdxd daemon")


app = FastAPI(
    title="mdxd",
    description="REST API daemon for compiling Markdown and MDX documents",
    version=__version__,
    lifespan=lifespan,
)

# Origins come from the environment only; YAML is read once the app starts
app.add_middleware(
    CORSMiddleware,
    allow_origins=BuildSettings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(build_router)
app.include_router(cache_router)
app.include_router(status_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        Welcome message with API information
    """
    return {
        "name": "mdxd",
        "version": __version__,
        "description": "REST API daemon for mdx_library",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }
