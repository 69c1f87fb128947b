"""API models for mdxd daemon.

This module defines request and response models for the REST API.
"""

from .requests import BuildRequest
from .requests import FileBuildRequest
from .responses import BuildResponse
from .responses import CacheClearResponse
from .responses import CacheEntryInfo
from .responses import CacheStatusResponse
from .responses import DiagnosticResponse
from .responses import StatusResponse

__all__ = [
    "BuildRequest",
    "FileBuildRequest",
    "BuildResponse",
    "DiagnosticResponse",
    "CacheEntryInfo",
    "CacheStatusResponse",
    "CacheClearResponse",
    "StatusResponse",
]
