"""Fixtures for daemon API tests."""

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mdx_library import CompilerCache
from mdx_library.config import BuildSettings
from mdxd.dependencies import get_compiler_cache
from mdxd.dependencies import get_settings
from mdxd.main import app


@pytest.fixture
def daemon_cache() -> CompilerCache:
    """Compiler cache injected into the app for one test."""
    return CompilerCache()


@pytest.fixture
def client(mock_storage_env: Path, daemon_cache: CompilerCache) -> Generator[TestClient, None, None]:
    """Create FastAPI test client with an isolated cache and settings."""
    app.dependency_overrides[get_compiler_cache] = lambda: daemon_cache
    app.dependency_overrides[get_settings] = lambda: BuildSettings(environment="production", default_group="default")
    yield TestClient(app)
    app.dependency_overrides.clear()
