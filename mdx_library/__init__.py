"""MDX build library.

This is the business logic layer behind the mdxd daemon and the mdxbuild CLI:
it compiles Markdown/MDX documents with cached compilers and inlines
``<include>`` directives.

Public Interface:
    Modules:
    - build: build_mdx entry point
    - cache: Compiler cache keyed by group, format and config hash
    - compiler: Parser, transforms and program generation
    - includes: Include directive resolution
    - frontmatter: Front-matter splitting
    - config: Settings loading
"""

from .build import MDXOptions
from .build import build_mdx
from .cache import CompilerCache
from .cache import compute_config_hash
from .cache import default_cache
from .dependencies import DependencyCollector
from .dependencies import DependencyRecorder
from .errors import ConfigurationError
from .errors import DocumentParseError
from .errors import IncludeResolutionError
from .errors import MDXBuildError

__all__ = [
    "build_mdx",
    "MDXOptions",
    "CompilerCache",
    "compute_config_hash",
    "default_cache",
    "DependencyCollector",
    "DependencyRecorder",
    "MDXBuildError",
    "ConfigurationError",
    "DocumentParseError",
    "IncludeResolutionError",
]
