"""Program generation from syntax trees.

The emitted program is Python source defining a component function:

    def MDXContent(h, Fragment, components=None, **props):
        ...
        return h(Fragment, {}, h(_components["h1"], {}, 'Title'), ...)

``h`` is the element factory supplied by the rendering runtime. Element names
resolve through ``_components`` so callers can substitute their own
implementations for any tag or component.
"""

import json
import logging
import re
from typing import Any

from ..errors import CompileError
from .files import SourceFile
from .nodes import SyntaxNode

logger = logging.getLogger(__name__)

INDENT = "    "

TAG_NAMES = {
    "paragraph": "p",
    "blockquote": "blockquote",
    "emphasis": "em",
    "strong": "strong",
    "delete": "del",
    "list": "ul",
    "listItem": "li",
    "thematicBreak": "hr",
    "break": "br",
    "table": "table",
    "tableRow": "tr",
    "inlineCode": "code",
    "link": "a",
    "image": "img",
    "html": "raw",
}

EXPORT_RE = re.compile(r"^export\s+(\w+)\s*=")


class ProgramGenerator:
    """Generates program source for one file.

    Args:
        file: File being compiled; receives diagnostics and supplies the path
        output_format: "program" for a module, "function-body" for a body that
            returns the module namespace
        development: Attach ``__source`` location props to elements
    """

    def __init__(self, file: SourceFile, output_format: str = "program", development: bool = False) -> None:
        self.file = file
        self.output_format = output_format
        self.development = development
        self._tags: dict[str, None] = {}

    def generate(self, tree: SyntaxNode) -> str:
        esm_lines, exports = self._collect_esm(tree)
        body = self._expression(tree, 1) or "h(Fragment, {})"
        frontmatter = _literal(self.file.data.get("frontmatter") or {})

        sections: list[str] = []
        if self.output_format == "program":
            source = self.file.path or "<source>"
            sections.append(f'"""Compiled from {source}."""')
        if esm_lines:
            sections.append("\n".join(esm_lines))
        sections.append(f"frontmatter = {frontmatter}")
        sections.append(self._component(body))

        if self.output_format == "program":
            sections.append("default = MDXContent")
        else:
            namespace = ['"default": MDXContent', '"frontmatter": frontmatter']
            namespace.extend(f'"{name}": {name}' for name in exports)
            sections.append("return {" + ", ".join(namespace) + "}")

        return "\n\n\n".join(sections) + "\n"

    def _component(self, body: str) -> str:
        defaults = "".join(f'{INDENT * 2}"{tag}": "{tag}",\n' for tag in self._tags)
        return (
            "def MDXContent(h, Fragment, components=None, **props):\n"
            f"{INDENT}_components = {{\n"
            f"{defaults}"
            f"{INDENT * 2}**(components or {{}}),\n"
            f"{INDENT}}}\n"
            f"{INDENT}return {body}"
        )

    def _collect_esm(self, tree: SyntaxNode) -> tuple[list[str], list[str]]:
        lines: list[str] = []
        exports: list[str] = []
        for node in tree.walk():
            if node.type != "mdxjsEsm":
                continue
            for line in (node.value or "").split("\n"):
                match = EXPORT_RE.match(line)
                if match:
                    exports.append(match.group(1))
                    line = line[len("export") :].lstrip()
                lines.append(line)
        return lines, exports

    def _expression(self, node: SyntaxNode, depth: int) -> str | None:
        node_type = node.type

        if node_type == "text":
            return repr(node.value or "")

        if node_type in ("root", "paragraph") and (node_type == "root" or node.data.get("tight")):
            return self._element("Fragment", {}, node.children, depth, node)

        if node_type == "heading":
            return self._element(self._tag(f"h{node.depth}"), {}, node.children, depth, node)

        if node_type == "list":
            props: dict[str, str] = {}
            if node.ordered and node.start is not None and node.start != 1:
                props["start"] = repr(node.start)
            tag = self._tag("ol" if node.ordered else "ul")
            return self._element(tag, props, node.children, depth, node)

        if node_type == "inlineCode":
            return self._call(self._tag("code"), {}, [repr(node.value or "")], depth, node)

        if node_type == "code":
            props = {"className": repr(f"language-{node.lang}")} if node.lang else {}
            code = self._call(self._tag("code"), props, [repr(node.value or "")], depth + 1, None)
            return self._call(self._tag("pre"), {}, [code], depth, node)

        if node_type == "link":
            props = {"href": repr(node.url or "")}
            if node.title:
                props["title"] = repr(node.title)
            return self._element(self._tag("a"), props, node.children, depth, node)

        if node_type == "image":
            props = {"src": repr(node.url or ""), "alt": repr(node.alt or "")}
            if node.title:
                props["title"] = repr(node.title)
            return self._call(self._tag("img"), props, [], depth, node)

        if node_type == "tableCell":
            tag = self._tag("th" if node.data.get("header") else "td")
            props = {"style": repr({"textAlign": node.align})} if node.align else {}
            return self._element(tag, props, node.children, depth, node)

        if node_type == "html":
            self.file.message("Raw HTML is emitted as an opaque `raw` element", node, source="codegen")
            return self._call(self._tag("raw"), {"value": repr(node.value or "")}, [], depth, node)

        if node_type in ("mdxJsxFlowElement", "mdxJsxTextElement"):
            return self._element(self._component_ref(node.name or ""), self._props(node), node.children, depth, node)

        if node_type in ("mdxFlowExpression", "mdxTextExpression"):
            expression = (node.value or "").strip()
            return f"({expression})" if expression else None

        if node_type == "mdxjsEsm":
            return None

        if node_type in TAG_NAMES:
            return self._element(self._tag(TAG_NAMES[node_type]), {}, node.children, depth, node)

        raise CompileError(f"Cannot compile node of type `{node_type}`")

    def _element(
        self,
        tag: str,
        props: dict[str, str],
        children: list[SyntaxNode],
        depth: int,
        node: SyntaxNode | None,
    ) -> str:
        rendered = [self._expression(child, depth + 1) for child in children]
        return self._call(tag, props, [code for code in rendered if code is not None], depth, node)

    def _call(self, tag: str, props: dict[str, str], children: list[str], depth: int, node: SyntaxNode | None) -> str:
        props = dict(props)
        if self.development and node is not None and node.position is not None:
            file_name = node.position.path or self.file.path
            props["__source"] = _literal({"fileName": file_name, "lineNumber": node.position.start_line})
        props_code = "{" + ", ".join(f"{key!r}: {value}" for key, value in props.items()) + "}"

        if not children:
            return f"h({tag}, {props_code})"
        inner = "".join(f"{INDENT * (depth + 1)}{child},\n" for child in children)
        return f"h({tag}, {props_code},\n{inner}{INDENT * depth})"

    def _props(self, node: SyntaxNode) -> dict[str, str]:
        props: dict[str, str] = {}
        for attribute in node.attributes:
            if attribute.value is None:
                props[attribute.name] = "True"
            elif attribute.expression:
                props[attribute.name] = f"({attribute.value.strip()})"
            else:
                props[attribute.name] = repr(attribute.value)
        return props

    def _tag(self, name: str) -> str:
        self._tags.setdefault(name, None)
        return f'_components["{name}"]'

    def _component_ref(self, name: str) -> str:
        if name[:1].islower():
            return self._tag(name)
        return f"_components[{name!r}]"


def _literal(value: Any) -> str:
    """Render JSON-compatible data as a Python literal."""
    return repr(json.loads(json.dumps(value, default=str)))


def generate_program(
    tree: SyntaxNode,
    file: SourceFile,
    output_format: str = "program",
    development: bool = False,
) -> str:
    """Generate program source for ``tree``."""
    generator = ProgramGenerator(file, output_format=output_format, development=development)
    program = generator.generate(tree)
    logger.debug(f"Generated {len(program)} characters of {output_format} for {file.path or '<source>'}")
    return program
