"""Thin HTTP wrapper around the compiler cache."""

import logging
from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends

from mdx_library import CompilerCache

from ..dependencies import get_compiler_cache
from ..models import CacheClearResponse
from ..models import CacheEntryInfo
from ..models import CacheStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/cache", tags=["cache"])


@router.get("", response_model=CacheStatusResponse)
async def get_cache_status(
    cache: Annotated[CompilerCache, Depends(get_compiler_cache)],
) -> CacheStatusResponse:
    """List cached compilers."""
    entries = [
        CacheEntryInfo(key=key, config_hash=entry.config_hash) for key, entry in sorted(cache.entries().items())
    ]
    return CacheStatusResponse(count=len(entries), entries=entries)


@router.delete("", response_model=CacheClearResponse)
async def clear_cache(
    cache: Annotated[CompilerCache, Depends(get_compiler_cache)],
) -> CacheClearResponse:
    """Drop every cached compiler."""
    cleared = cache.clear()
    logger.info(f"Cache cleared via API ({cleared} compiler(s))")
    return CacheClearResponse(cleared=cleared)
