"""Document compiler: parse, transform and compile in one pipeline.

Contract:
- Inputs: CompilerOptions at construction; SourceFile (or text) per process call
- Outputs: The same SourceFile with ``value`` replaced by the compiled program
  and ``tree`` set to the transformed syntax tree
- Side Effects: Whatever the configured transforms do (file reads, ...)
"""

import inspect
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from .codegen import generate_program
from .files import SourceFile
from .nodes import SyntaxNode
from .options import CompilerOptions
from .options import PluginSpec
from .parser import DocumentParser

logger = logging.getLogger(__name__)

Transformer = Callable[[SyntaxNode, SourceFile], Awaitable[None] | None]


class DocumentCompiler:
    """Compiler for one document format and configuration.

    Construction attaches every configured plugin, so building a compiler is
    the expensive step; a constructed compiler is reused across documents.

    Example:
        >>> compiler = create_compiler({"format": "md"})
        >>> file = asyncio.run(compiler.process("# Hello"))
        >>> "MDXContent" in file.value
        True
    """

    def __init__(self, options: CompilerOptions) -> None:
        self.options = options
        try:
            self.parser = DocumentParser(
                format=options.format,
                preset=options.markdown_preset,
                enable=options.enable,
            )
        except (KeyError, ValueError) as e:
            raise ConfigurationError(f"Invalid markdown options: {e}") from e
        self.transformers: list[Transformer] = [self._attach(plugin) for plugin in options.remark_plugins]

    @property
    def format(self) -> str:
        return self.options.format

    def _attach(self, plugin: PluginSpec) -> Transformer:
        if isinstance(plugin, tuple):
            attacher, settings = plugin
        else:
            attacher, settings = plugin, {}

        if not callable(attacher):
            raise ConfigurationError(f"Plugin must be callable, got {type(attacher).__name__}")

        transformer = attacher(self, **settings)
        if transformer is not None and not callable(transformer):
            raise ConfigurationError(f"Plugin {getattr(attacher, '__name__', attacher)!r} returned a non-callable")
        return transformer or _noop

    def parse(self, text: str) -> SyntaxNode:
        """Parse text with this compiler's syntax configuration."""
        return self.parser.parse(text)

    async def run(self, tree: SyntaxNode, file: SourceFile) -> SyntaxNode:
        """Run all transforms over ``tree`` in order, awaiting async ones."""
        for transformer in self.transformers:
            result = transformer(tree, file)
            if inspect.isawaitable(result):
                await result
        return tree

    def compile(self, tree: SyntaxNode, file: SourceFile) -> str:
        """Generate the program for a transformed tree."""
        return generate_program(
            tree,
            file,
            output_format=self.options.output_format,
            development=self.options.development,
        )

    async def process(self, file: SourceFile | str) -> SourceFile:
        """Parse, transform and compile a document.

        Args:
            file: Tagged input, or bare source text

        Returns:
            The input file with ``value`` holding the compiled program
        """
        if isinstance(file, str):
            file = SourceFile(value=file)

        logger.debug(f"Processing {file.path or '<source>'} as {self.options.format}")
        tree = self.parse(file.value)
        await self.run(tree, file)
        file.tree = tree
        file.value = self.compile(tree, file)
        return file


def _noop(tree: SyntaxNode, file: SourceFile) -> None:
    return None


def create_compiler(options: CompilerOptions | Mapping[str, Any] | None = None) -> DocumentCompiler:
    """Construct a DocumentCompiler from options.

    Raises:
        ConfigurationError: If the options are malformed
    """
    if options is None:
        options = CompilerOptions()
    elif not isinstance(options, CompilerOptions):
        try:
            options = CompilerOptions.model_validate(dict(options))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid compiler options: {e}") from e

    logger.debug(f"Creating {options.format} compiler with {len(options.remark_plugins)} plugin(s)")
    return DocumentCompiler(options)
