"""Request models for mdxd API.

Pydantic models for validating incoming build requests.
"""

from typing import Any
from typing import Literal

from pydantic import Field

from mdxd.models.base import CamelCaseModel


class CompilerFieldsRequest(CamelCaseModel):
    """Compiler options a request may override.

    Unset fields fall back to the build defaults and are left out of the
    derived configuration fingerprint.
    """

    format: Literal["md", "mdx"] | None = Field(default=None, description="Syntax format; inferred from the path when unset")
    output_format: Literal["program", "function-body"] | None = Field(default=None, description="Shape of the emitted program")
    development: bool | None = Field(default=None, description="Emit source locations on elements")
    markdown_preset: Literal["commonmark", "default", "zero"] | None = Field(default=None, description="markdown-it preset")
    enable: list[str] | None = Field(default=None, description="Extra markdown-it rules to enable")

    def compiler_fields(self) -> dict[str, Any]:
        """Return the compiler options the caller actually set."""
        names = ("output_format", "development", "markdown_preset", "enable")
        return {name: getattr(self, name) for name in names if getattr(self, name) is not None}


class BuildRequest(CompilerFieldsRequest):
    """Request to compile document source text.

    Attributes:
        source: Document body, front-matter already removed
        group: Cache group (default: collection, then the configured default group)
        config_hash: Configuration fingerprint (default: derived from the compiler fields)
        file_path: Path of the document; required when the source uses includes
        frontmatter: Front-matter already split from the source
        data: Extra metadata exposed to transforms
        collection: Collection the document belongs to
    """

    source: str = Field(..., description="Document source text")
    group: str | None = Field(default=None, description="Cache group")
    config_hash: str | None = Field(default=None, description="Configuration fingerprint")
    file_path: str | None = Field(default=None, description="Path of the document on disk")
    frontmatter: dict[str, Any] | None = Field(default=None, description="Parsed front-matter")
    data: dict[str, Any] = Field(default_factory=dict, description="Extra metadata for transforms")
    collection: str | None = Field(default=None, description="Collection name")


class FileBuildRequest(CompilerFieldsRequest):
    """Request to compile a document read from disk.

    Front-matter is split from the file on the server.

    Attributes:
        path: Path of the document to build
        group: Cache group (default: collection, then the configured default group)
        config_hash: Configuration fingerprint (default: derived from the compiler fields)
        collection: Collection the document belongs to
    """

    path: str = Field(..., description="Path of the document on disk")
    group: str | None = Field(default=None, description="Cache group")
    config_hash: str | None = Field(default=None, description="Configuration fingerprint")
    collection: str | None = Field(default=None, description="Collection name")
