"""In-process query cache with prefix invalidation.

Keys are tuples such as ``("conversations", actor_id)`` or
``("messages", conversation_id, cursor)``. Invalidating a prefix tuple drops
every key that starts with it, so ``invalidate(("messages", conv_id))``
clears all cached pages of one conversation. Entries are never patched in
place; writers invalidate and the next read re-fetches.
"""

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from ..utils.logger import get_app_logger


CacheKey = Tuple[Any, ...]

CONVERSATIONS_TAG: CacheKey = ("conversations",)
MESSAGES_TAG: CacheKey = ("messages",)

MISSING = object()


def conversations_key(actor_id: str) -> CacheKey:
    return CONVERSATIONS_TAG + (actor_id,)


def messages_tag(conversation_id: str) -> CacheKey:
    return MESSAGES_TAG + (conversation_id,)


def messages_key(conversation_id: str, cursor: Optional[str]) -> CacheKey:
    return messages_tag(conversation_id) + (cursor or "",)


@dataclass
class _Entry:
    value: Any
    stored_at: float
    stale_seconds: Optional[float]


class QueryCache:
    """Tuple-keyed cache of read results with time-based staleness."""

    def __init__(
        self,
        stale_seconds: Optional[float] = 10.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            stale_seconds: Default freshness window; None keeps entries until invalidated
            clock: Monotonic time source
        """
        self.stale_seconds = stale_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, _Entry] = {}
        self.logger = get_app_logger()
        self._hits = 0
        self._misses = 0
        self._invalidations = 0

    def _is_fresh(self, entry: _Entry) -> bool:
        if entry.stale_seconds is None:
            return True
        return self._clock() - entry.stored_at < entry.stale_seconds

    def get(self, key: CacheKey) -> Any:
        """Return the cached value, or MISSING when absent or stale."""
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry):
            if entry is not None:
                del self._entries[key]
            self._misses += 1
            return MISSING
        self._hits += 1
        return entry.value

    def set(self, key: CacheKey, value: Any, stale_seconds: Optional[float] = None) -> None:
        self._entries[key] = _Entry(
            value=value,
            stored_at=self._clock(),
            stale_seconds=self.stale_seconds if stale_seconds is None else stale_seconds
        )

    async def get_or_fetch(
        self,
        key: CacheKey,
        fetch: Callable[[], Awaitable[Any]],
        cache_if: Optional[Callable[[Any], bool]] = None
    ) -> Any:
        """
        Read-through lookup.

        Args:
            key: Cache key
            fetch: Coroutine factory producing the fresh value on a miss
            cache_if: Predicate deciding whether a fetched value is stored

        Returns:
            Cached or freshly fetched value
        """
        value = self.get(key)
        if value is not MISSING:
            return value

        value = await fetch()
        if cache_if is None or cache_if(value):
            self.set(key, value)
        return value

    def invalidate(self, prefix: CacheKey) -> int:
        """
        Drop every entry whose key starts with prefix.

        Returns:
            Number of entries removed
        """
        size = len(prefix)
        doomed = [key for key in self._entries if key[:size] == prefix]
        for key in doomed:
            del self._entries[key]
        self._invalidations += 1
        if doomed:
            self.logger.debug(f"Invalidated {len(doomed)} cache entries under {prefix}")
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def metrics(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "invalidations": self._invalidations,
            "hit_rate": round(self._hits / total * 100, 2) if total else 0,
        }
