"""Markdown and MDX parsing on top of markdown-it-py.

markdown-it produces a flat token stream; this module folds it into the
SyntaxNode tree used by transforms and code generation. In ``mdx`` format
HTML-looking tags are read as component elements:

- ``<Note>text</Note>`` alone in a paragraph becomes an ``mdxJsxFlowElement``
  whose children are phrasing content
- a multi-line element body (``<Note>\\n\\ntext\\n\\n</Note>``) is parsed as
  block content
- tags inside running text become ``mdxJsxTextElement`` nodes
- ``{expression}`` becomes an mdx expression node
- top-level ``import``/``from ... import``/``export name =`` paragraphs
  become ``mdxjsEsm`` nodes
"""

import logging
import re
import textwrap
from collections.abc import Iterable
from collections.abc import Sequence

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ..errors import DocumentParseError
from .nodes import JsxAttribute
from .nodes import Position
from .nodes import SyntaxNode

logger = logging.getLogger(__name__)

TAG_NAME = r"[A-Za-z][\w.:-]*"
OPEN_TAG_RE = re.compile(rf"<({TAG_NAME})((?:\s+[^<>]*?)?)\s*(/?)>", re.DOTALL)
CLOSE_TAG_RE = re.compile(rf"</({TAG_NAME})\s*>")
ATTRIBUTE_RE = re.compile(r"""([A-Za-z_:][\w:.-]*)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|\{([^{}]*)\}))?""")
EXPRESSION_RE = re.compile(r"\{([^{}]*)\}")
ESM_RE = re.compile(r"^(?:import\s+[\w.]+|from\s+[\w.]+\s+import\s|export\s+\w+\s*=)")


class DocumentParser:
    """Parses Markdown (``md``) or MDX (``mdx``) text into a SyntaxNode tree.

    Args:
        format: "mdx" to recognise component syntax, "md" for plain Markdown
        preset: markdown-it preset name
        enable: Additional markdown-it rules to enable

    Raises:
        ValueError: If ``preset`` or one of ``enable`` is unknown to markdown-it
    """

    def __init__(self, format: str = "mdx", preset: str = "commonmark", enable: Iterable[str] = ()) -> None:
        self.format = format
        self.md = MarkdownIt(preset, {"html": True})
        rules = list(enable)
        if rules:
            self.md.enable(rules)

    @property
    def mdx(self) -> bool:
        return self.format == "mdx"

    def parse(self, text: str) -> SyntaxNode:
        """Parse document text into a ``root`` node."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = text.split("\n")
        tokens = self.md.parse(text)
        children = self._convert_blocks(SyntaxTreeNode(tokens).children, lines, 0, top_level=True)
        return SyntaxNode(type="root", children=children, position=Position(1, max(len(lines), 1)))

    # Block level

    def _convert_blocks(
        self,
        nodes: Sequence[SyntaxTreeNode],
        lines: list[str],
        offset: int,
        top_level: bool = False,
    ) -> list[SyntaxNode]:
        out: list[SyntaxNode] = []
        stack: list[SyntaxNode] = []

        for node in nodes:
            target = stack[-1].children if stack else out

            if node.type == "html_block" and self.mdx:
                self._convert_html_block(node, stack, out, offset)
                continue

            if top_level and self.mdx and node.type == "paragraph":
                raw = self._raw_source(node, lines)
                if ESM_RE.match(raw):
                    target.append(SyntaxNode(type="mdxjsEsm", value=raw, position=self._position(node, offset)))
                    continue

            target.append(self._convert_block(node, lines, offset))

        if stack:
            self._unclosed(stack[-1])
        return out

    def _convert_block(self, node: SyntaxTreeNode, lines: list[str], offset: int) -> SyntaxNode:
        position = self._position(node, offset)
        node_type = node.type

        if node_type == "paragraph":
            children = self._convert_inline(self._inline_children(node))
            if self.mdx:
                promoted = self._promote(children)
                if promoted is not None:
                    promoted.position = position
                    return promoted
            paragraph = SyntaxNode(type="paragraph", children=children, position=position)
            if node.hidden:
                paragraph.data["tight"] = True
            return paragraph

        if node_type == "heading":
            return SyntaxNode(
                type="heading",
                depth=int(node.tag[1:]),
                children=self._convert_inline(self._inline_children(node)),
                position=position,
            )

        if node_type == "blockquote":
            return SyntaxNode(
                type="blockquote",
                children=self._convert_blocks(node.children, lines, offset),
                position=position,
            )

        if node_type in ("bullet_list", "ordered_list"):
            start = node.attrs.get("start") if node_type == "ordered_list" else None
            return SyntaxNode(
                type="list",
                ordered=node_type == "ordered_list",
                start=int(start) if start is not None else None,
                children=[self._convert_block(item, lines, offset) for item in node.children],
                position=position,
            )

        if node_type == "list_item":
            return SyntaxNode(
                type="listItem",
                children=self._convert_blocks(node.children, lines, offset),
                position=position,
            )

        if node_type in ("fence", "code_block"):
            info = (node.info or "").strip()
            return SyntaxNode(
                type="code",
                lang=info.split()[0] if info else None,
                value=node.content.rstrip("\n"),
                position=position,
            )

        if node_type == "hr":
            return SyntaxNode(type="thematicBreak", position=position)

        if node_type == "html_block":
            return SyntaxNode(type="html", value=node.content.rstrip("\n"), position=position)

        if node_type == "table":
            return self._convert_table(node, position)

        raise DocumentParseError(f"Unsupported markdown construct: {node_type}", line=self._line(position))

    def _convert_table(self, node: SyntaxTreeNode, position: Position | None) -> SyntaxNode:
        rows: list[SyntaxNode] = []
        for section in node.children:
            for row in section.children:
                cells = []
                for cell in row.children:
                    style = str(cell.attrs.get("style", ""))
                    align = style.split(":", 1)[1] if style.startswith("text-align:") else None
                    cells.append(
                        SyntaxNode(
                            type="tableCell",
                            align=align,
                            children=self._convert_inline(self._inline_children(cell)),
                            data={"header": section.type == "thead"},
                        )
                    )
                rows.append(SyntaxNode(type="tableRow", children=cells))
        return SyntaxNode(type="table", children=rows, position=position)

    def _convert_html_block(
        self,
        node: SyntaxTreeNode,
        stack: list[SyntaxNode],
        out: list[SyntaxNode],
        offset: int,
    ) -> None:
        """Fold an HTML block into component elements.

        An opening tag without its closing tag in the same block stays open on
        ``stack``; following sibling blocks become its children until the
        matching closing tag arrives.
        """
        position = self._position(node, offset)
        line_offset = position.start_line - 1 if position is not None else offset
        rest = node.content.strip()
        consumed = False

        while rest:
            target = stack[-1].children if stack else out

            closing = CLOSE_TAG_RE.match(rest)
            if closing:
                name = closing.group(1)
                if not stack:
                    raise DocumentParseError(f"Unexpected closing tag `</{name}>`", line=self._line(position))
                if stack[-1].name != name:
                    raise DocumentParseError(
                        f"Unexpected closing tag `</{name}>`, expected `</{stack[-1].name}>`",
                        line=self._line(position),
                    )
                closed = stack.pop()
                if closed.position is not None and position is not None:
                    closed.position.end_line = position.end_line
                rest = rest[closing.end() :].lstrip()
                consumed = True
                continue

            opening = OPEN_TAG_RE.match(rest)
            if opening is None:
                if not consumed:
                    target.append(SyntaxNode(type="html", value=node.content.rstrip("\n"), position=position))
                else:
                    target.extend(self._parse_fragment(rest, block=True, offset=line_offset))
                return

            consumed = True
            element = self._jsx_element("mdxJsxFlowElement", opening)
            if position is not None:
                element.position = Position(position.start_line, position.end_line)
            target.append(element)
            rest = rest[opening.end() :]

            if opening.group(3):
                rest = rest.lstrip()
                continue

            span = self._find_closing_tag(rest, element.name or "")
            if span is None:
                stack.append(element)
                rest = rest.lstrip()
                continue

            inner = rest[: span[0]]
            element.children = self._parse_fragment(inner, block="\n" in inner.strip(), offset=line_offset)
            rest = rest[span[1] :].lstrip()

    def _parse_fragment(self, text: str, block: bool, offset: int) -> list[SyntaxNode]:
        if block:
            fragment = textwrap.dedent(text).strip("\n")
            tokens = self.md.parse(fragment)
            return self._convert_blocks(SyntaxTreeNode(tokens).children, fragment.split("\n"), offset)

        fragment = text.strip()
        if not fragment:
            return []
        tree = SyntaxTreeNode(self.md.parseInline(fragment))
        if not tree.children:
            return []
        return self._convert_inline(tree.children[0].children)

    @staticmethod
    def _find_closing_tag(text: str, name: str) -> tuple[int, int] | None:
        pattern = re.compile(rf"<(/?){re.escape(name)}(?=[\s/>])[^<>]*?(/?)>")
        depth = 1
        for match in pattern.finditer(text):
            if match.group(1):
                depth -= 1
                if depth == 0:
                    return match.start(), match.end()
            elif not match.group(2):
                depth += 1
        return None

    # Inline level

    def _convert_inline(self, nodes: Sequence[SyntaxTreeNode]) -> list[SyntaxNode]:
        out: list[SyntaxNode] = []
        stack: list[SyntaxNode] = []

        for node in nodes:
            target = stack[-1].children if stack else out

            if node.type == "html_inline" and self.mdx:
                content = node.content
                closing = CLOSE_TAG_RE.fullmatch(content)
                if closing:
                    name = closing.group(1)
                    if not stack or stack[-1].name != name:
                        raise DocumentParseError(f"Unexpected closing tag `</{name}>`")
                    closed = stack.pop()
                    closed.children = self._finish_inline(closed.children)
                    continue

                opening = OPEN_TAG_RE.fullmatch(content)
                if opening:
                    element = self._jsx_element("mdxJsxTextElement", opening)
                    target.append(element)
                    if not opening.group(3):
                        stack.append(element)
                    continue

            target.append(self._convert_inline_node(node))

        if stack:
            self._unclosed(stack[-1])
        return self._finish_inline(out)

    def _convert_inline_node(self, node: SyntaxTreeNode) -> SyntaxNode:
        node_type = node.type

        if node_type in ("text", "text_special"):
            return SyntaxNode(type="text", value=node.content)
        if node_type == "softbreak":
            return SyntaxNode(type="text", value="\n")
        if node_type == "hardbreak":
            return SyntaxNode(type="break")
        if node_type == "code_inline":
            return SyntaxNode(type="inlineCode", value=node.content)
        if node_type == "em":
            return SyntaxNode(type="emphasis", children=self._convert_inline(node.children))
        if node_type == "strong":
            return SyntaxNode(type="strong", children=self._convert_inline(node.children))
        if node_type == "s":
            return SyntaxNode(type="delete", children=self._convert_inline(node.children))
        if node_type == "link":
            return SyntaxNode(
                type="link",
                url=str(node.attrs.get("href", "")),
                title=node.attrs.get("title"),
                children=self._convert_inline(node.children),
            )
        if node_type == "image":
            return SyntaxNode(
                type="image",
                url=str(node.attrs.get("src", "")),
                alt=node.content,
                title=node.attrs.get("title"),
            )
        if node_type == "html_inline":
            return SyntaxNode(type="html", value=node.content)

        raise DocumentParseError(f"Unsupported inline construct: {node_type}")

    def _finish_inline(self, nodes: list[SyntaxNode]) -> list[SyntaxNode]:
        merged: list[SyntaxNode] = []
        for node in nodes:
            if node.type == "text" and merged and merged[-1].type == "text":
                merged[-1].value = (merged[-1].value or "") + (node.value or "")
            else:
                merged.append(node)

        if not self.mdx:
            return merged

        result: list[SyntaxNode] = []
        for node in merged:
            if node.type != "text" or "{" not in (node.value or ""):
                result.append(node)
                continue
            value = node.value or ""
            cursor = 0
            for match in EXPRESSION_RE.finditer(value):
                if match.start() > cursor:
                    result.append(SyntaxNode(type="text", value=value[cursor : match.start()]))
                result.append(SyntaxNode(type="mdxTextExpression", value=match.group(1)))
                cursor = match.end()
            if cursor < len(value):
                result.append(SyntaxNode(type="text", value=value[cursor:]))
        return result

    # Helpers

    @staticmethod
    def _promote(children: list[SyntaxNode]) -> SyntaxNode | None:
        """Turn a paragraph holding a single element or expression into a flow node."""
        significant = [c for c in children if not (c.type == "text" and not (c.value or "").strip())]
        if len(significant) != 1:
            return None
        only = significant[0]
        if only.type == "mdxJsxTextElement":
            only.type = "mdxJsxFlowElement"
            return only
        if only.type == "mdxTextExpression":
            only.type = "mdxFlowExpression"
            return only
        return None

    @staticmethod
    def _jsx_element(node_type: str, match: re.Match[str]) -> SyntaxNode:
        attributes = []
        for attribute in ATTRIBUTE_RE.finditer(match.group(2) or ""):
            name, double, single, expression = attribute.groups()
            if expression is not None:
                attributes.append(JsxAttribute(name=name, value=expression, expression=True))
            elif double is not None or single is not None:
                attributes.append(JsxAttribute(name=name, value=double if double is not None else single))
            else:
                attributes.append(JsxAttribute(name=name))
        return SyntaxNode(type=node_type, name=match.group(1), attributes=attributes)

    @staticmethod
    def _inline_children(node: SyntaxTreeNode) -> Sequence[SyntaxTreeNode]:
        if not node.children:
            return []
        return node.children[0].children

    @staticmethod
    def _raw_source(node: SyntaxTreeNode, lines: list[str]) -> str:
        if node.map is None:
            return ""
        start, end = node.map
        return "\n".join(lines[start:end]).strip()

    @staticmethod
    def _position(node: SyntaxTreeNode, offset: int) -> Position | None:
        if node.map is None:
            return None
        start, end = node.map
        return Position(start_line=start + 1 + offset, end_line=max(end, start + 1) + offset)

    @staticmethod
    def _line(position: Position | None) -> int | None:
        return position.start_line if position is not None else None

    def _unclosed(self, node: SyntaxNode) -> None:
        raise DocumentParseError(
            f"Expected a closing tag for `<{node.name}>`",
            line=self._line(node.position),
        )
