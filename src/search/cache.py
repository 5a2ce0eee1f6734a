"""
Time-expiring in-memory cache for upstream responses and chapter text.
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import TOTAL_CHAPTERS, CACHE_TTL_SECONDS
from src.search.models import Chapter

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = CACHE_TTL_SECONDS


class TTLCache:
    """Key -> value store whose entries expire ``ttl_seconds`` after being set.

    Expiry is checked on read only; expired entries stay in the map until a
    later ``set`` overwrites them. Writes are last-write-wins.

    Args:
        ttl_seconds: Lifetime of an entry.
        clock: Callable returning the current time in seconds. Injected so
            tests can control time.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        data, timestamp = entry
        if self._clock() - timestamp < self.ttl_seconds:
            return data
        return None

    def set(self, key: str, data: Any) -> None:
        with self._lock:
            self._entries[key] = (data, self._clock())

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CorpusStore:
    """Per-chapter view over a ``TTLCache``.

    A chapter is either cached (valid entry) or absent. Callers never assume
    the full corpus is available.
    """

    def __init__(self, cache: TTLCache):
        self.cache = cache

    @staticmethod
    def chapter_key(number: int) -> str:
        return f"surah-text-{number}"

    def get_chapter(self, number: int) -> Optional[Chapter]:
        return self.cache.get(self.chapter_key(number))

    def put_chapter(self, chapter: Chapter) -> None:
        self.cache.set(self.chapter_key(chapter.number), chapter)
        logger.debug(f"Cached chapter {chapter.number} ({len(chapter.verses)} verses)")

    def is_cached(self, number: int) -> bool:
        return self.get_chapter(number) is not None

    def cached_chapters(self) -> List[int]:
        return [n for n in range(1, TOTAL_CHAPTERS + 1) if self.is_cached(n)]
