"""Include directive resolution.

``<include>./shared/intro.mdx</include>`` is replaced by the parsed content of
the referenced file. Resolution runs in three phases:

1. find_include_sites: synchronous depth-first walk collecting directive nodes
2. load_include: read, strip front-matter, parse and recursively resolve each
   target; all sites of one document run concurrently
3. apply_include: overwrite each directive node in place with its content

Contract:
- Inputs: Syntax tree, path of the document it came from, host compiler
- Outputs: The tree with every directive replaced by parsed content
- Side Effects: File reads; one dependency report per resolved directive
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiofiles

from .compiler.nodes import Position
from .dependencies import DependencyRecorder
from .errors import DocumentParseError
from .errors import IncludeResolutionError
from .frontmatter import split_frontmatter

if TYPE_CHECKING:
    from .compiler.files import SourceFile
    from .compiler.nodes import SyntaxNode
    from .compiler.processor import DocumentCompiler
    from .compiler.processor import Transformer

logger = logging.getLogger(__name__)

INCLUDE_TAG = "include"

# Backstop for deep but acyclic nesting; cycles are caught by the ancestor chain
MAX_INCLUDE_DEPTH = 64


@dataclass
class IncludeSite:
    """An include directive found in a tree, with its path specifier."""

    node: SyntaxNode
    specifier: str


def is_include_directive(node: SyntaxNode) -> bool:
    return node.type == "mdxJsxFlowElement" and node.name == INCLUDE_TAG


def find_include_sites(tree: SyntaxNode) -> list[IncludeSite]:
    """Collect include directives in document order.

    Directives are treated as leaves: their children are never searched.
    A directive whose first child is missing or not a text node is skipped
    and stays in the tree unchanged.
    """
    sites: list[IncludeSite] = []

    def visit(node: SyntaxNode) -> None:
        if is_include_directive(node):
            first = node.children[0] if node.children else None
            if first is None or first.type != "text":
                logger.debug("Skipping include directive without a text specifier")
                return
            sites.append(IncludeSite(node=node, specifier=first.value or ""))
            return
        for child in node.children:
            visit(child)

    visit(tree)
    return sites


def resolve_include_path(specifier: str, base_dir: str) -> str:
    """Resolve a specifier against the including document's directory.

    Absolute specifiers are returned normalised; ``.`` and ``..`` segments
    are collapsed.

    Example:
        >>> resolve_include_path("../shared/b.mdx", "/docs/guide")
        '/docs/shared/b.mdx'
        >>> resolve_include_path("/abs/c.mdx", "/docs")
        '/abs/c.mdx'
    """
    return os.path.abspath(os.path.join(base_dir, specifier))


def apply_include(node: SyntaxNode, replacement: SyntaxNode) -> None:
    """Overwrite a directive node with the parsed root of its target."""
    node.replace_with(replacement)


async def read_include(path: str, specifier: str) -> str:
    try:
        async with aiofiles.open(path, encoding="utf-8") as f:
            return await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read include {specifier!r} at {path}: {e}")
        raise IncludeResolutionError(
            f"Cannot read included file {path!r}: {e}",
            specifier=specifier,
            path=path,
        ) from e


def mark_source(tree: SyntaxNode, path: str, line_offset: int = 0) -> None:
    """Point every positioned node of ``tree`` at lines of ``path``."""
    for node in tree.walk():
        if node.position is not None:
            node.position = Position(
                start_line=node.position.start_line + line_offset,
                end_line=node.position.end_line + line_offset,
                path=path,
            )


async def load_include(
    compiler: DocumentCompiler,
    site: IncludeSite,
    base_dir: str,
    recorder: DependencyRecorder | None = None,
    depth: int = 0,
    chain: tuple[str, ...] = (),
) -> SyntaxNode:
    """Read and parse the target of one include directive.

    Nested directives in the included content are resolved relative to the
    included file before the content is returned.

    Args:
        chain: Absolute paths of the documents currently being resolved,
            outermost first; a target already on it is a cycle
    """
    target = resolve_include_path(site.specifier, base_dir)
    if target in chain:
        cycle = " -> ".join((*chain[chain.index(target) :], target))
        raise IncludeResolutionError(f"Circular include: {cycle}", specifier=site.specifier, path=target)

    content = await read_include(target, site.specifier)

    try:
        body = split_frontmatter(content, path=target).content
        parsed = compiler.parse(body)
    except DocumentParseError as e:
        if e.path is None:
            e.path = target
        raise

    # Lines are counted from the top of the file, front-matter included
    mark_source(parsed, target, content.count("\n") - body.count("\n"))

    if recorder is not None:
        recorder.add_dependency(target)

    logger.debug(f"Resolved include {site.specifier!r} -> {target}")
    await resolve_includes(compiler, parsed, target, recorder, depth=depth + 1, chain=chain)
    return parsed


async def resolve_includes(
    compiler: DocumentCompiler,
    tree: SyntaxNode,
    path: str | None,
    recorder: DependencyRecorder | None = None,
    depth: int = 0,
    chain: tuple[str, ...] = (),
) -> SyntaxNode:
    """Resolve every include directive in ``tree``.

    Args:
        compiler: Compiler whose parser reads included content
        tree: Tree to rewrite in place
        path: Path of the document ``tree`` was parsed from
        recorder: Optional sink notified with each resolved path
        depth: Nesting level of ``tree``; 0 for the host document
        chain: Documents that included ``tree``, outermost first

    Returns:
        The same tree, with directives replaced

    Raises:
        IncludeResolutionError: If ``path`` is None while directives exist, a
            target cannot be read, a target includes itself through any chain
            of includes, or nesting exceeds MAX_INCLUDE_DEPTH
        DocumentParseError: If included content is malformed
    """
    sites = find_include_sites(tree)
    if not sites:
        return tree

    if path is None:
        raise IncludeResolutionError(
            f"Cannot resolve include {sites[0].specifier!r}: the including document has no path",
            specifier=sites[0].specifier,
        )

    if depth >= MAX_INCLUDE_DEPTH:
        raise IncludeResolutionError(
            f"Includes nested deeper than {MAX_INCLUDE_DEPTH} levels in {path}",
            specifier=sites[0].specifier,
            path=path,
        )

    here = os.path.abspath(path)
    chain = (*chain, here)
    base_dir = os.path.dirname(here)
    replacements = await asyncio.gather(
        *(load_include(compiler, site, base_dir, recorder, depth, chain) for site in sites)
    )

    for site, replacement in zip(sites, replacements):
        apply_include(site.node, replacement)
    return tree


def remark_include(compiler: DocumentCompiler) -> Transformer:
    """Plugin resolving include directives during a compiler's transform phase."""

    async def transformer(tree: SyntaxNode, file: SourceFile) -> None:
        await resolve_includes(compiler, tree, file.path, file.dependency_recorder)

    return transformer
