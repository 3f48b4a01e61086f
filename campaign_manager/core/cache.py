"""In-process TTL cache shared by all request handlers.

Expiry is lazy: an entry past its deadline stays in the map until the next
``get`` for that key removes it. There is no size limit and no sweeper.
"""
import threading
import time
from typing import Any, Callable, Dict, NamedTuple, Optional

_MISSING = object()


class CacheEntry(NamedTuple):
    value: Any
    expires_at: float


class TTLCache:
    """Thread-safe key/value store with per-entry time to live.

    One instance lives for the whole process; every map operation takes the
    internal lock because sync endpoints run on a thread pool.
    """

    def __init__(self, default_ttl: float = 60.0, clock: Callable[[], float] = time.monotonic):
        if default_ttl < 0:
            raise ValueError("default_ttl must be non-negative")
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def _lookup(self, key: str) -> Any:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return _MISSING
            if self._clock() >= entry.expires_at:
                self._store.pop(key, None)
                return _MISSING
            return entry.value

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` until ``now + ttl``, replacing any existing entry."""
        if ttl is None:
            ttl = self.default_ttl
        if ttl < 0:
            raise ValueError("ttl must be non-negative")
        with self._lock:
            self._store[key] = CacheEntry(value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [key for key in self._store if key.startswith(prefix)]
            for key in doomed:
                del self._store[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def get_or_set(self, key: str, producer: Callable[[], Any], ttl: Optional[float] = None) -> Any:
        """Return the cached value, or call ``producer`` once and cache its result.

        The lock is not held while ``producer`` runs, so two concurrent misses
        on the same key can both produce; the later ``set`` wins. If
        ``producer`` raises, nothing is cached.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value
        value = producer()
        self.set(key, value, ttl)
        return value

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._store.get(key)
            return entry is not None and self._clock() < entry.expires_at

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
