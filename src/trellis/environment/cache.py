"""Template source cache.

Long-lived store mapping template name to source text. One instance is
owned by each ``Environment``; pass your own to share a cache between
environments or to isolate one in tests.

Thread-Safety:
    Reads are plain dict lookups. Inserts take a lock. Two threads missing
    the same name at once may both read the backing store; the second
    insert overwrites an equal string, so the race costs only a duplicate
    read.

Entries are never evicted. The cache lives as long as its owner.

"""

from __future__ import annotations

import threading


class TemplateCache:
    """Name → source store, populated lazily, never invalidated.

    Example:
            >>> cache = TemplateCache()
            >>> cache.get("home.html") is None
            True
            >>> cache.set("home.html", "<h1>Home</h1>")
            >>> cache.get("home.html")
            '<h1>Home</h1>'
            >>> cache.info()
            {'size': 1, 'hits': 1, 'misses': 1}

    """

    __slots__ = ("_entries", "_hits", "_lock", "_misses")

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, name: str) -> str | None:
        """Return cached source, or None on a miss."""
        source = self._entries.get(name)
        # Stats are advisory; unsynchronized increments may drop a count
        if source is None:
            self._misses += 1
        else:
            self._hits += 1
        return source

    def set(self, name: str, source: str) -> None:
        with self._lock:
            self._entries[name] = source

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def info(self) -> dict[str, int]:
        """Return size and hit/miss counters."""
        return {"size": len(self._entries), "hits": self._hits, "misses": self._misses}
