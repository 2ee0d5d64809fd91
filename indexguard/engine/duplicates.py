"""Near-duplicate content detection across pages of the same type.

Hashes are kept per page type in a :class:`ContentHashStore`. The
in-memory store is process-local and unbounded; deployments running
several processes should use :class:`CacheHashStore` over a shared cache.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter, defaultdict
from typing import Dict, Optional, Protocol, Set

from django.core.cache import caches

from .config import EngineConfig, resolve
from .text import extract_text, generate_content_hash, pattern_hash, sentence_structure
from .types import UniquenessResult

logger = logging.getLogger(__name__)


class ContentHashStore(Protocol):
    def has(self, page_type: str, digest: str) -> bool:
        ...

    def add(self, page_type: str, digest: str) -> bool:
        """Record ``digest``; return False if it was already present."""
        ...

    def clear(self) -> None:
        ...


class InMemoryHashStore:
    """Thread-safe per-page-type hash sets held for the process lifetime."""

    def __init__(self) -> None:
        self._hashes: Dict[str, Set[str]] = defaultdict(set)
        self._lock = threading.Lock()

    def has(self, page_type: str, digest: str) -> bool:
        with self._lock:
            return digest in self._hashes.get(page_type, ())

    def add(self, page_type: str, digest: str) -> bool:
        with self._lock:
            bucket = self._hashes[page_type]
            if digest in bucket:
                return False
            bucket.add(digest)
            return True

    def clear(self) -> None:
        with self._lock:
            self._hashes.clear()


class CacheHashStore:
    """Hash store backed by a Django cache so processes can share it.

    ``cache.add`` is an atomic insert-if-absent on the shared backends.
    Clearing bumps a generation counter instead of deleting keys.
    """

    def __init__(self, cache_alias: str = "default", key_prefix: str = "indexguard:hash") -> None:
        self.cache = caches[cache_alias]
        self.key_prefix = key_prefix

    def _generation(self) -> int:
        key = f"{self.key_prefix}:generation"
        self.cache.add(key, 0, timeout=None)
        return int(self.cache.get(key, 0))

    def _key(self, page_type: str, digest: str) -> str:
        return f"{self.key_prefix}:{self._generation()}:{page_type}:{digest}"

    def has(self, page_type: str, digest: str) -> bool:
        return self.cache.get(self._key(page_type, digest)) is not None

    def add(self, page_type: str, digest: str) -> bool:
        return bool(self.cache.add(self._key(page_type, digest), 1, timeout=None))

    def clear(self) -> None:
        key = f"{self.key_prefix}:generation"
        self.cache.add(key, 0, timeout=None)
        self.cache.incr(key)


class PatternUsageStore:
    """Counts how often a content pattern has been used."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def increment(self, key: str) -> int:
        with self._lock:
            self._counts[key] += 1
            return self._counts[key]

    def clear(self) -> None:
        with self._lock:
            self._counts.clear()


_default_store: ContentHashStore = InMemoryHashStore()
_default_usage = PatternUsageStore()


def get_default_store() -> ContentHashStore:
    return _default_store


def set_default_store(store: ContentHashStore) -> None:
    global _default_store
    _default_store = store


def get_default_usage_store() -> PatternUsageStore:
    return _default_usage


def check_content_duplicate(page_type: str, digest: str, store: Optional[ContentHashStore] = None) -> bool:
    """Return True if ``digest`` was already seen for ``page_type``.

    A first sighting is recorded and reported as not duplicate.
    """

    target = store if store is not None else _default_store
    duplicate = not target.add(page_type, digest)
    if duplicate:
        logger.debug("Duplicate %s content hash %s", page_type, digest)
    return duplicate


def check_duplicate(page_type: str, text: str, store: Optional[ContentHashStore] = None) -> bool:
    """Hash rendered text (HTML allowed) and check it against the store."""

    return check_content_duplicate(page_type, generate_content_hash(extract_text(text)), store)


def is_content_pattern_unique(
    content: str,
    page_type: str,
    max_usage: int = 3,
    usage: Optional[PatternUsageStore] = None,
) -> bool:
    counter = usage if usage is not None else _default_usage
    return counter.increment(f"{page_type}:{pattern_hash(content)}") <= max_usage


def is_sentence_structure_unique(
    sentence: str,
    page_type: str,
    max_usage: int = 2,
    usage: Optional[PatternUsageStore] = None,
) -> bool:
    counter = usage if usage is not None else _default_usage
    structure = sentence_structure(sentence)
    return counter.increment(f"{page_type}:structure:{pattern_hash(structure)}") <= max_usage


def validate_content_uniqueness(
    content: str,
    page_type: str,
    config: EngineConfig | None = None,
    usage: Optional[PatternUsageStore] = None,
) -> UniquenessResult:
    """Block content whose template or exact wording is overused."""

    limits = resolve(config).section("content")
    if not is_sentence_structure_unique(content, page_type, int(limits.get("structure_max_usage", 2)), usage):
        return UniquenessResult(False, "Sentence structure is overused across pages")
    if not is_content_pattern_unique(content, page_type, int(limits.get("pattern_max_usage", 3)), usage):
        return UniquenessResult(False, "Content pattern is overused")
    return UniquenessResult(True)
