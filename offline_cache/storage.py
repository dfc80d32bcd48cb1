"""In-memory named cache stores keyed by request URL."""
import time
from dataclasses import dataclass

from offline_cache.fetch import FetchResponse


@dataclass(frozen=True)
class CachedResourceEntry:
    request_key: str
    response:    FetchResponse
    stored_at:   float


class Cache:
    def __init__(self, name: str, clock=time.time):
        self.name    = name
        self._clock  = clock
        self._entries: dict[str, CachedResourceEntry] = {}

    def match(self, url: str) -> CachedResourceEntry | None:
        return self._entries.get(url)

    def put(self, url: str, response: FetchResponse) -> CachedResourceEntry:
        entry = CachedResourceEntry(url, response, self._clock())
        self._entries[url] = entry
        return entry

    def delete(self, url: str) -> bool:
        return self._entries.pop(url, None) is not None

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class CacheStorage:
    """All cache stores of one origin, in creation order."""

    def __init__(self, clock=time.time):
        self._clock  = clock
        self._caches: dict[str, Cache] = {}

    def open(self, name: str) -> Cache:
        if name not in self._caches:
            self._caches[name] = Cache(name, clock=self._clock)
        return self._caches[name]

    def has(self, name: str) -> bool:
        return name in self._caches

    def delete(self, name: str) -> bool:
        return self._caches.pop(name, None) is not None

    def keys(self) -> list[str]:
        return list(self._caches)

    def match(self, url: str) -> CachedResourceEntry | None:
        """First entry for url across every store."""
        for cache in self._caches.values():
            entry = cache.match(url)
            if entry is not None:
                return entry
        return None

    def entry_count(self) -> int:
        return sum(len(cache) for cache in self._caches.values())
