"""Front-matter splitting for Markdown and MDX documents.

Documents may start with a YAML block fenced by ``---`` lines:

    ---
    title: Hello
    ---

    Body text

Contract:
- Inputs: Raw document text
- Outputs: FrontmatterResult with parsed data and the remaining body
- Side Effects: None
"""

import logging
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import yaml

from .errors import FrontmatterError

logger = logging.getLogger(__name__)

FENCE = "---"


@dataclass
class FrontmatterResult:
    """Result of splitting a document into front-matter and body."""

    data: dict[str, Any] = field(default_factory=dict)
    content: str = ""
    matter: str = ""

    @property
    def has_frontmatter(self) -> bool:
        return bool(self.matter)


def split_frontmatter(text: str, path: str | None = None) -> FrontmatterResult:
    """Split a leading YAML front-matter block from the document body.

    Args:
        text: Full document text
        path: Source path, used only in error messages

    Returns:
        FrontmatterResult with the parsed mapping and the body after the
        closing fence. Text without an opening fence, or with a fence that is
        never closed, is returned unchanged as the body.

    Raises:
        FrontmatterError: If the fenced block is not valid YAML or not a mapping

    Example:
        >>> result = split_frontmatter("---\\ntitle: Hi\\n---\\nBody")
        >>> result.data
        {'title': 'Hi'}
        >>> result.content
        'Body'
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    normalized = text.replace("\r\n", "\n")
    lines = normalized.split("\n")

    if not lines or lines[0].rstrip() != FENCE:
        return FrontmatterResult(content=text)

    end_index = None
    for index in range(1, len(lines)):
        if lines[index].rstrip() == FENCE:
            end_index = index
            break

    if end_index is None:
        logger.debug(f"Front-matter fence not closed in {path or '<source>'}, treating as body")
        return FrontmatterResult(content=text)

    matter = "\n".join(lines[1:end_index])
    content = "\n".join(lines[end_index + 1 :])

    try:
        data = yaml.safe_load(matter) if matter.strip() else {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Failed to parse YAML front-matter: {e}", path=path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Front-matter must be a mapping, got {type(data).__name__}",
            path=path,
        )

    return FrontmatterResult(data=data, content=content, matter=matter)
