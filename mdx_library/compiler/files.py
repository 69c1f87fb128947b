"""Tagged pipeline input and output.

A SourceFile carries the document through parse, transform and compile.
Before processing ``value`` holds the source text; afterwards it holds the
compiled program and ``tree`` holds the final syntax tree.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Literal

from ..dependencies import DependencyRecorder
from .nodes import SyntaxNode


@dataclass
class Diagnostic:
    """A message attached to a file during processing."""

    reason: str
    severity: Literal["info", "warning", "error"] = "warning"
    line: int | None = None
    source: str | None = None

    def __str__(self) -> str:
        location = f":{self.line}" if self.line is not None else ""
        return f"{self.severity}{location}: {self.reason}"


@dataclass
class SourceFile:
    """Document flowing through the compiler pipeline.

    Attributes:
        value: Source text before processing, compiled program afterwards
        path: File path of the document, if it has one
        data: Free-form metadata shared between transforms (frontmatter, ...)
        messages: Diagnostics collected during processing
        dependency_recorder: Optional sink for files read while processing
        tree: Final syntax tree, set once processing completes
    """

    value: str
    path: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    messages: list[Diagnostic] = field(default_factory=list)
    dependency_recorder: DependencyRecorder | None = None
    tree: SyntaxNode | None = None

    @property
    def dirname(self) -> str | None:
        if self.path is None:
            return None
        return os.path.dirname(self.path)

    @property
    def basename(self) -> str | None:
        if self.path is None:
            return None
        return os.path.basename(self.path)

    @property
    def extname(self) -> str | None:
        if self.path is None:
            return None
        return os.path.splitext(self.path)[1]

    def message(
        self,
        reason: str,
        node: SyntaxNode | None = None,
        severity: Literal["info", "warning", "error"] = "warning",
        source: str | None = None,
    ) -> Diagnostic:
        """Attach a diagnostic, located at ``node`` when it has a position."""
        line = node.position.start_line if node is not None and node.position is not None else None
        diagnostic = Diagnostic(reason=reason, severity=severity, line=line, source=source)
        self.messages.append(diagnostic)
        return diagnostic
