"""Construction parameters for DocumentCompiler."""

from collections.abc import Callable
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

DocumentFormat = Literal["md", "mdx"]
OutputFormat = Literal["program", "function-body"]

# A plugin is called with the compiler (and any configured keyword options)
# and returns a transformer ``(tree, file) -> None | Awaitable[None]``.
PluginSpec = Callable[..., Any] | tuple[Callable[..., Any], dict[str, Any]]


class CompilerOptions(BaseModel):
    """Options used to construct a DocumentCompiler.

    Attributes:
        format: Syntax accepted by the parser ("mdx" enables component syntax)
        output_format: Shape of the emitted program
        development: Emit source locations for debugging
        remark_plugins: Transforms run over the syntax tree, in order
        markdown_preset: markdown-it preset the parser starts from
        enable: Additional markdown-it rules to enable (e.g. "table")
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    format: DocumentFormat = "mdx"
    output_format: OutputFormat = "program"
    development: bool = False
    remark_plugins: list[PluginSpec] = Field(default_factory=list)
    markdown_preset: Literal["commonmark", "default", "zero"] = "commonmark"
    enable: list[str] = Field(default_factory=list)
