"""TTL cache whose entries are also tied to a content signature."""

import time
from collections import OrderedDict
from typing import Any, Hashable


class TTLCache:
    """In-memory cache with time-to-live, max-size eviction and signatures.

    An entry is only returned while it is younger than ``ttl`` *and* was
    stored with the same signature the caller passes in. Callers use a
    signature of file names and mtimes, so editing a post invalidates the
    cached index immediately.

    Usage::

        cache = TTLCache(ttl=60, max_size=8)
        cache.set("_posts", report, signature=sig)
        hit = cache.get("_posts", signature=sig)  # None if stale or changed
    """

    def __init__(self, ttl: float = 60, max_size: int = 8) -> None:
        self._ttl = ttl
        self._max_size = max_size
        # OrderedDict preserves insertion order for LRU eviction
        self._store: OrderedDict[str, tuple[Any, Hashable, float]] = OrderedDict()

    def get(self, key: str, signature: Hashable = None) -> Any | None:
        """Return the cached value if fresh and stored under *signature*, else None."""
        entry = self._store.get(key)
        if entry is None:
            return None
        value, stored_signature, ts = entry
        if time.time() - ts > self._ttl or stored_signature != signature:
            del self._store[key]
            return None
        self._store.move_to_end(key)
        return value

    def set(self, key: str, value: Any, signature: Hashable = None) -> None:
        """Store a value under *key*, evicting the oldest entry if at capacity."""
        if key in self._store:
            self._store.move_to_end(key)
        self._store[key] = (value, signature, time.time())
        while len(self._store) > self._max_size:
            self._store.popitem(last=False)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
