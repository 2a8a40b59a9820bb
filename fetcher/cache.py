from __future__ import annotations

import asyncio
import concurrent.futures
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    keys: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "keys": self.keys}


class TTLCache:
    """Thread-safe in-memory map whose entries expire after a TTL."""

    def __init__(self, default_ttl: float, clock: Clock = time.monotonic) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                expires_at, value = entry
                if self._clock() < expires_at:
                    self._hits += 1
                    return value
                del self._entries[key]
            self._misses += 1
            return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._entries[key] = (now + ttl, value)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def keys(self) -> List[str]:
        now = self._clock()
        with self._lock:
            return [key for key, (expires_at, _) in self._entries.items() if now < expires_at]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            live = sum(1 for expires_at, _ in self._entries.values() if now < expires_at)
            return CacheStats(hits=self._hits, misses=self._misses, keys=live)


class TwoTierCache:
    """Short-lived fresh entries backed by long-lived stale copies.

    ``get`` only ever answers from the fresh tier. The stale tier is read
    explicitly by callers whose live fetch failed.
    """

    STALE_SUFFIX = ":stale"

    def __init__(self, fresh_ttl: float, stale_ttl: float, clock: Clock = time.monotonic) -> None:
        if stale_ttl < fresh_ttl:
            raise ValueError("stale TTL must not be shorter than the fresh TTL")
        self._fresh = TTLCache(fresh_ttl, clock=clock)
        self._stale = TTLCache(stale_ttl, clock=clock)

    def get(self, key: str) -> Optional[Any]:
        return self._fresh.get(key)

    def get_stale(self, key: str) -> Optional[Any]:
        return self._stale.get(key + self.STALE_SUFFIX)

    def set(self, key: str, value: Any) -> None:
        self._fresh.set(key, value)
        self._stale.set(key + self.STALE_SUFFIX, value)

    def clear(self) -> None:
        self._fresh.clear()
        self._stale.clear()

    def stats(self) -> Dict[str, Dict[str, int]]:
        return {"fresh": self._fresh.stats().to_dict(), "stale": self._stale.stats().to_dict()}


class SingleFlight(Generic[T]):
    """Collapse concurrent calls for the same key into one in-flight call.

    Works across event loops: Flask runs each request in its own thread
    with its own loop, so followers wait on a thread-safe future.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: Dict[str, concurrent.futures.Future] = {}

    def in_flight(self) -> int:
        with self._lock:
            return len(self._calls)

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        with self._lock:
            future = self._calls.get(key)
            leader = future is None
            if leader:
                future = concurrent.futures.Future()
                future.set_running_or_notify_cancel()
                self._calls[key] = future

        if not leader:
            return await asyncio.wrap_future(future)

        try:
            result = await fn()
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._calls.pop(key, None)
