"""Compiler instance cache.

Constructing a DocumentCompiler attaches every plugin, so compilers are
memoised per ``(group, format)`` and reused while the configuration
fingerprint stays the same. A changed fingerprint replaces the entry on the
next lookup; entries are otherwise kept for the life of the process.

Keys are ``f"{group}:{format}"``. A group name containing ``:`` can collide
with another group/format pair.

The cache holds no lock. Concurrent lookups for the same key with different
fingerprints may each rebuild; the last one to finish wins. Compilers handed
out earlier stay valid because the cache never mutates them.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    from .compiler.processor import DocumentCompiler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A constructed compiler and the fingerprint it was built with."""

    compiler: DocumentCompiler
    config_hash: str


def cache_key(group: str, format: str) -> str:
    return f"{group}:{format}"


def compute_config_hash(config: Mapping[str, Any]) -> str:
    """Fingerprint a configuration mapping.

    Keys are sorted and values that are not JSON types are stringified, so
    equal configurations always produce the same hash.

    Example:
        >>> compute_config_hash({"a": 1}) == compute_config_hash({"a": 1})
        True
    """
    payload = json.dumps(config, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class CompilerCache:
    """Maps ``(group, format)`` to the most recently built compiler."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get_or_build(
        self,
        group: str,
        format: str,
        config_hash: str,
        build: Callable[[], DocumentCompiler],
    ) -> DocumentCompiler:
        """Return the cached compiler, building a new one if needed.

        ``build`` is called only when no entry exists for the key or the
        stored fingerprint differs from ``config_hash``. If ``build`` raises,
        the existing entry is left in place and the error propagates.
        """
        key = cache_key(group, format)
        entry = self._entries.get(key)

        if entry is not None and entry.config_hash == config_hash:
            return entry.compiler

        if entry is None:
            logger.info(f"Building compiler for {key}")
        else:
            logger.info(f"Config changed for {key}, rebuilding compiler")

        compiler = build()
        self._entries[key] = CacheEntry(compiler=compiler, config_hash=config_hash)
        return compiler

    def get(self, group: str, format: str) -> CacheEntry | None:
        return self._entries.get(cache_key(group, format))

    def entries(self) -> dict[str, CacheEntry]:
        """Snapshot of all entries keyed by cache key."""
        return dict(self._entries)

    def clear(self) -> int:
        """Drop all entries and return how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cached compiler(s)")
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


# Process-wide cache used when callers do not supply their own
default_cache = CompilerCache()
