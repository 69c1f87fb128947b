"""Syntax tree nodes produced by the document parser.

The tree follows the mdast vocabulary (``root``, ``paragraph``, ``text``,
``mdxJsxFlowElement``, ...) so transforms written against it read the same
way as their unified/remark counterparts.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from typing import Any

JSX_ELEMENT_TYPES = frozenset({"mdxJsxFlowElement", "mdxJsxTextElement"})


@dataclass
class Position:
    """1-based, inclusive line span of a node in its source.

    ``path`` names the file the lines belong to when it differs from the
    document being compiled, as for content spliced in by an include.
    """

    start_line: int
    end_line: int
    path: str | None = None


@dataclass
class JsxAttribute:
    """Attribute on a component element.

    ``value`` is None for boolean attributes (``<Tabs persist />``).
    ``expression`` marks values written in braces (``items={data}``), whose
    value is emitted verbatim instead of as a string literal.
    """

    name: str
    value: str | None = None
    expression: bool = False


@dataclass
class SyntaxNode:
    """A node in the document syntax tree.

    Only the fields relevant to a node's ``type`` are populated: ``value`` for
    literals (text, code, expressions, ESM), ``name``/``attributes`` for
    component elements, ``depth`` for headings, ``url``/``title``/``alt`` for
    links and images.
    """

    type: str
    children: list[SyntaxNode] = field(default_factory=list)
    value: str | None = None
    name: str | None = None
    attributes: list[JsxAttribute] = field(default_factory=list)
    depth: int | None = None
    ordered: bool | None = None
    start: int | None = None
    lang: str | None = None
    url: str | None = None
    title: str | None = None
    alt: str | None = None
    align: str | None = None
    position: Position | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_literal(self) -> bool:
        return self.value is not None and not self.children

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield this node and all descendants, depth-first in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def text_content(self) -> str:
        """Concatenate the values of all text-bearing descendants."""
        if self.type in ("text", "inlineCode"):
            return self.value or ""
        return "".join(child.text_content() for child in self.children)

    def replace_with(self, other: SyntaxNode) -> None:
        """Overwrite every field of this node with the fields of ``other``.

        The node keeps its identity (and therefore its slot in the parent's
        ``children`` list) but becomes indistinguishable from ``other``.
        """
        for node_field in fields(self):
            setattr(self, node_field.name, getattr(other, node_field.name))

    def get_attribute(self, name: str) -> JsxAttribute | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


def text(value: str) -> SyntaxNode:
    return SyntaxNode(type="text", value=value)


def element(name: str, *children: SyntaxNode, flow: bool = True, **attributes: str) -> SyntaxNode:
    """Build a component element node, mostly useful in transforms and tests."""
    return SyntaxNode(
        type="mdxJsxFlowElement" if flow else "mdxJsxTextElement",
        name=name,
        children=list(children),
        attributes=[JsxAttribute(name=key, value=value) for key, value in attributes.items()],
    )
