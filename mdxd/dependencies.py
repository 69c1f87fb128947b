"""Shared dependency factories for FastAPI endpoints.

Tests override these through ``app.dependency_overrides`` to supply their
own cache and settings.
"""

from typing import Annotated

from fastapi import Depends

from mdx_library import CompilerCache
from mdx_library import default_cache
from mdx_library.config import BuildSettings
from mdx_library.config import load_config

from .services import BuildService


def get_compiler_cache() -> CompilerCache:
    """Get the process-wide compiler cache.

    Returns:
        CompilerCache shared by every request
    """
    return default_cache


def get_settings() -> BuildSettings:
    """Get build settings.

    Returns:
        BuildSettings loaded from YAML and environment
    """
    return load_config()


def get_build_service(
    cache: Annotated[CompilerCache, Depends(get_compiler_cache)],
    settings: Annotated[BuildSettings, Depends(get_settings)],
) -> BuildService:
    """Get build service.

    Returns:
        BuildService bound to the shared cache
    """
    return BuildService(cache=cache, settings=settings)
