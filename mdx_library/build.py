"""Build entry point: cached compiler lookup plus one pipeline run.

Contract:
- Inputs: Cache group, configuration fingerprint, source text, MDXOptions
- Outputs: Processed SourceFile (compiled program, final tree, diagnostics)
- Side Effects: May construct and cache a compiler; include resolution reads files
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import Field
from pydantic import ValidationError

from .cache import CompilerCache
from .cache import default_cache
from .compiler import CompilerOptions
from .compiler import DocumentCompiler
from .compiler import DocumentFormat
from .compiler import SourceFile
from .compiler import create_compiler
from .config.settings import BuildSettings
from .dependencies import DependencyRecorder
from .errors import ConfigurationError
from .includes import remark_include

logger = logging.getLogger(__name__)


class MDXOptions(CompilerOptions):
    """Options for build_mdx.

    Every CompilerOptions field is accepted and forwarded to the compiler.
    The fields below are consumed by the build itself.

    Attributes:
        collection: Name of the collection the document belongs to
        file_path: Path of the source document; anchors include resolution
        frontmatter: Front-matter already split from the source
        data: Extra metadata exposed to transforms via ``file.data``
        format: Explicit syntax format; inferred from ``file_path`` when unset
    """

    collection: str | None = None
    file_path: str | None = None
    frontmatter: dict[str, Any] | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    format: DocumentFormat | None = None


def resolve_format(options: MDXOptions) -> str:
    """Pick the document format: explicit option, then file extension, then mdx."""
    if options.format:
        return options.format
    if options.file_path:
        return "mdx" if options.file_path.endswith(".mdx") else "md"
    return "mdx"


def compiler_options(options: MDXOptions, format: str, settings: BuildSettings) -> dict[str, Any]:
    """Assemble construction options for a new compiler.

    Caller-set compiler fields override the defaults. The include plugin
    always runs first, and the resolved format always wins.
    """
    values: dict[str, Any] = {
        "output_format": "program",
        "development": settings.is_development,
    }
    forwarded = set(CompilerOptions.model_fields) - {"format", "remark_plugins"}
    for name in forwarded:
        if name in options.model_fields_set:
            values[name] = getattr(options, name)
    values["remark_plugins"] = [remark_include, *options.remark_plugins]
    values["format"] = format
    return values


def _coerce_options(options: MDXOptions | Mapping[str, Any] | None) -> MDXOptions:
    if options is None:
        return MDXOptions()
    if isinstance(options, MDXOptions):
        return options
    try:
        return MDXOptions.model_validate(dict(options))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid build options: {e}") from e


async def build_mdx(
    group: str,
    config_hash: str,
    source: str,
    options: MDXOptions | Mapping[str, Any] | None = None,
    *,
    dependency_recorder: DependencyRecorder | None = None,
    cache: CompilerCache | None = None,
    settings: BuildSettings | None = None,
) -> SourceFile:
    """Compile a document with a cached compiler.

    Args:
        group: Cache group of the content, usually the collection name
        config_hash: Fingerprint of the configuration; a change rebuilds the compiler
        source: Document text (front-matter already removed)
        options: Build and compiler options
        dependency_recorder: Notified with every file read by include resolution
        cache: Compiler cache to use (default: process-wide cache)
        settings: Ambient settings (default: read from the environment)

    Returns:
        The processed file; ``value`` holds the compiled program

    Raises:
        ConfigurationError: If options are malformed
        IncludeResolutionError: If an include cannot be resolved
        DocumentParseError: If the source or included content is malformed
    """
    options = _coerce_options(options)
    cache = cache if cache is not None else default_cache
    format = resolve_format(options)

    def build() -> DocumentCompiler:
        return create_compiler(compiler_options(options, format, settings or BuildSettings()))

    compiler = cache.get_or_build(group, format, config_hash, build)

    data: dict[str, Any] = {**options.data, "frontmatter": options.frontmatter}
    if options.collection is not None:
        data["collection"] = options.collection

    logger.debug(f"Building {options.file_path or '<source>'} in group {group!r} as {format}")
    return await compiler.process(
        SourceFile(
            value=source,
            path=options.file_path,
            data=data,
            dependency_recorder=dependency_recorder,
        )
    )
