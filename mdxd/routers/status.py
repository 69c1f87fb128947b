"""Status router for mdxd API.

Provides health check and status information.
"""

import logging
import time
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends

from mdx_library import CompilerCache
from mdx_library.config import BuildSettings

from .. import __version__
from ..dependencies import get_compiler_cache
from ..dependencies import get_settings
from ..models import StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["status"])

# Track daemon start time for uptime calculation
_start_time = time.time()


@router.get("/status", response_model=StatusResponse)
async def get_status(
    cache: Annotated[CompilerCache, Depends(get_compiler_cache)],
    settings: Annotated[BuildSettings, Depends(get_settings)],
) -> StatusResponse:
    """Get daemon status.

    Returns:
        Daemon status information including version, uptime, and cache size
    """
    return StatusResponse(
        status="running",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        environment=settings.environment,
        cached_compilers=len(cache),
    )


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Simple health status
    """
    return {"status": "healthy"}
