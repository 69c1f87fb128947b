"""Dependency recording for host build systems.

The include resolver reports every file it reads so that a host build tool
can invalidate outputs when those files change.
"""

from typing import Protocol
from typing import runtime_checkable


@runtime_checkable
class DependencyRecorder(Protocol):
    """Sink notified with the absolute path of every file read during a build."""

    def add_dependency(self, path: str) -> None:
        """Record that the build read ``path``."""
        ...


class DependencyCollector:
    """DependencyRecorder that keeps reported paths in memory.

    Paths are stored in report order, duplicates included, because the
    resolver reports each include occurrence independently.

    Example:
        >>> collector = DependencyCollector()
        >>> collector.add_dependency("/docs/b.mdx")
        >>> collector.add_dependency("/docs/b.mdx")
        >>> collector.paths
        ['/docs/b.mdx', '/docs/b.mdx']
        >>> collector.unique_paths()
        ['/docs/b.mdx']
    """

    def __init__(self) -> None:
        self.paths: list[str] = []

    def add_dependency(self, path: str) -> None:
        self.paths.append(path)

    def unique_paths(self) -> list[str]:
        """Return reported paths without duplicates, first occurrence first."""
        return list(dict.fromkeys(self.paths))

    def __len__(self) -> int:
        return len(self.paths)
