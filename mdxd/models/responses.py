"""Response models for mdxd API.

Pydantic models for API responses.
"""

from typing import Any

from pydantic import Field

from mdxd.models.base import CamelCaseModel


class DiagnosticResponse(CamelCaseModel):
    """A diagnostic attached to the built document.

    Attributes:
        reason: Message text
        severity: info, warning or error
        line: Source line, when known
        source: Pipeline stage that produced it
    """

    reason: str = Field(..., description="Message text")
    severity: str = Field(..., description="Diagnostic severity")
    line: int | None = Field(default=None, description="Source line")
    source: str | None = Field(default=None, description="Producing stage")


class BuildResponse(CamelCaseModel):
    """Result of a successful build.

    Attributes:
        code: Compiled program
        path: Path of the document, if any
        format: Syntax format the document was compiled as
        group: Cache group the compiler came from
        config_hash: Fingerprint the compiler was looked up with
        frontmatter: Front-matter of the document
        dependencies: Absolute paths of every included file, first occurrence first
        messages: Diagnostics produced during the build
    """

    code: str = Field(..., description="Compiled program")
    path: str | None = Field(default=None, description="Document path")
    format: str = Field(..., description="Syntax format")
    group: str = Field(..., description="Cache group")
    config_hash: str = Field(..., description="Configuration fingerprint")
    frontmatter: dict[str, Any] | None = Field(default=None, description="Document front-matter")
    dependencies: list[str] = Field(default_factory=list, description="Included files")
    messages: list[DiagnosticResponse] = Field(default_factory=list, description="Diagnostics")


class CacheEntryInfo(CamelCaseModel):
    """One cached compiler.

    Attributes:
        key: Cache key ("group:format")
        config_hash: Fingerprint the compiler was built with
    """

    key: str = Field(..., description="Cache key")
    config_hash: str = Field(..., description="Configuration fingerprint")


class CacheStatusResponse(CamelCaseModel):
    """Snapshot of the compiler cache."""

    count: int = Field(..., description="Number of cached compilers")
    entries: list[CacheEntryInfo] = Field(default_factory=list, description="Cached compilers")


class CacheClearResponse(CamelCaseModel):
    """Result of clearing the compiler cache."""

    cleared: int = Field(..., description="Number of compilers removed")


class StatusResponse(CamelCaseModel):
    """Daemon status.

    Attributes:
        status: Daemon state
        version: Daemon version
        uptime_seconds: Seconds since the daemon started
        environment: Configured environment
        cached_compilers: Number of compilers in the cache
    """

    status: str = Field(..., description="Daemon state")
    version: str = Field(..., description="Daemon version")
    uptime_seconds: float = Field(..., description="Uptime in seconds")
    environment: str = Field(..., description="Configured environment")
    cached_compilers: int = Field(..., description="Number of cached compilers")
