"""Document compiler for Markdown and MDX.

Public Interface:
    - create_compiler: Build a DocumentCompiler from options
    - DocumentCompiler: parse / run / compile / process
    - CompilerOptions: Construction parameters
    - SourceFile, Diagnostic: Pipeline input/output
    - SyntaxNode, JsxAttribute, Position: Syntax tree
"""

from .files import Diagnostic
from .files import SourceFile
from .nodes import JsxAttribute
from .nodes import Position
from .nodes import SyntaxNode
from .options import CompilerOptions
from .options import DocumentFormat
from .options import OutputFormat
from .processor import DocumentCompiler
from .processor import Transformer
from .processor import create_compiler

__all__ = [
    "create_compiler",
    "DocumentCompiler",
    "CompilerOptions",
    "DocumentFormat",
    "OutputFormat",
    "Transformer",
    "SourceFile",
    "Diagnostic",
    "SyntaxNode",
    "JsxAttribute",
    "Position",
]
