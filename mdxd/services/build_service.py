"""Build service shared by the daemon routers and the CLI.

Contract:
- Inputs: BuildRequest / FileBuildRequest models
- Outputs: BuildOutcome (processed file plus the lookup details used)
- Side Effects: Reads documents and includes from disk, fills the compiler cache
"""

import logging
import os
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import aiofiles

from mdx_library import CompilerCache
from mdx_library import DependencyCollector
from mdx_library import MDXOptions
from mdx_library import build_mdx
from mdx_library import compute_config_hash
from mdx_library.build import resolve_format
from mdx_library.compiler import SourceFile
from mdx_library.config import BuildSettings
from mdx_library.frontmatter import split_frontmatter

from ..models import BuildRequest
from ..models import FileBuildRequest

logger = logging.getLogger(__name__)


@dataclass
class BuildOutcome:
    """A finished build and the cache lookup that produced it."""

    file: SourceFile
    format: str
    group: str
    config_hash: str
    frontmatter: dict[str, Any] | None = None
    dependencies: list[str] = field(default_factory=list)


class BuildService:
    """Runs builds against a compiler cache.

    Requests that leave out the group fall back to their collection and then
    to the configured default group. Requests that leave out the fingerprint
    get one derived from the format and the compiler fields they set, so
    changing any of those rebuilds the compiler.
    """

    def __init__(self, cache: CompilerCache, settings: BuildSettings) -> None:
        self.cache = cache
        self.settings = settings

    def _group(self, group: str | None, collection: str | None) -> str:
        return group or collection or self.settings.default_group

    def _config_hash(self, request: BuildRequest | FileBuildRequest, format: str) -> str:
        if request.config_hash:
            return request.config_hash
        return compute_config_hash({"format": format, **request.compiler_fields()})

    async def build_source(self, request: BuildRequest) -> BuildOutcome:
        """Compile source text from a request.

        Raises:
            MDXBuildError: Any library error, unchanged
        """
        options = MDXOptions(
            collection=request.collection,
            file_path=os.path.abspath(request.file_path) if request.file_path else None,
            frontmatter=request.frontmatter,
            data=request.data,
            format=request.format,
            **request.compiler_fields(),
        )
        return await self._build(request, options, request.source)

    async def build_file(self, request: FileBuildRequest) -> BuildOutcome:
        """Read a document from disk, split its front-matter and compile it.

        Raises:
            FileNotFoundError: If the document does not exist
            MDXBuildError: Any library error, unchanged
        """
        path = os.path.abspath(request.path)
        async with aiofiles.open(path, encoding="utf-8") as f:
            text = await f.read()

        matter = split_frontmatter(text, path=path)
        options = MDXOptions(
            collection=request.collection,
            file_path=path,
            frontmatter=matter.data,
            format=request.format,
            **request.compiler_fields(),
        )
        return await self._build(request, options, matter.content)

    async def _build(self, request: BuildRequest | FileBuildRequest, options: MDXOptions, source: str) -> BuildOutcome:
        format = resolve_format(options)
        group = self._group(request.group, request.collection)
        config_hash = self._config_hash(request, format)
        collector = DependencyCollector()

        file = await build_mdx(
            group,
            config_hash,
            source,
            options,
            dependency_recorder=collector,
            cache=self.cache,
            settings=self.settings,
        )

        logger.info(f"Built {options.file_path or '<source>'} ({format}, {len(collector)} include(s))")
        return BuildOutcome(
            file=file,
            format=format,
            group=group,
            config_hash=config_hash,
            frontmatter=options.frontmatter,
            dependencies=collector.unique_paths(),
        )
