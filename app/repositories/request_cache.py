"""Request cache - duration-bounded response cache in front of the dispatcher."""

import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from loguru import logger

from app.repositories.api_registry import ApiRegistry
from json_api_client.urls import Pair, append_query

if TYPE_CHECKING:
    from json_api_client.dispatcher import RequestDispatcher

MISS = object()


def cache_key(base_url: str, path: str, params: list[Pair] | None) -> str:
    """<baseURL><path>[?k=v&k=v] with call params in call order."""
    return append_query(base_url + path, params or [])


class RequestCache:
    """In-memory TTL cache keyed by request identity.

    Entries expire passively on lookup; prune() runs on every write.
    The cache remembers the duration of the last cached call (one value for
    the whole cache). When a call arrives with a different duration, the entry
    for that call's key is evicted before the lookup.
    """

    def __init__(
        self,
        registry: ApiRegistry,
        dispatcher: "RequestDispatcher",
        clock: Callable[[], float] = time.monotonic,
    ):
        self._registry = registry
        self._dispatcher = dispatcher
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, Any]] = {}
        self._last_duration: int | None = None

    def get(self, key: str, default: Any = None) -> Any:
        """Unexpired cached value, or default on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return default
            return value

    def put(self, key: str, value: Any, duration_seconds: float) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + duration_seconds, value)
        self.prune()

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def prune(self) -> int:
        """Drop expired entries, return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.debug("Request cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    async def cached_get(
        self,
        api_id: str,
        duration_seconds: int | None,
        method: str,
        path: str,
        params: list[Pair] | None = None,
        headers: list[Pair] | None = None,
        body: str | None = None,
    ) -> Any:
        """Cached response if fresh, otherwise dispatch and store."""
        api = self._registry.lookup(api_id)
        if not duration_seconds:
            return await self._dispatcher.execute_api(api, method, path, params, headers, body)

        key = cache_key(api.url, path, params)

        with self._lock:
            if self._last_duration != duration_seconds:
                self._entries.pop(key, None)
            self._last_duration = duration_seconds

        cached = self.get(key, MISS)
        if cached is not MISS:
            logger.debug("Cache hit: {}", key)
            return cached

        logger.debug("Cache miss: {}", key)
        result = await self._dispatcher.execute_api(api, method, path, params, headers, body)
        self.put(key, result, duration_seconds)
        return result
