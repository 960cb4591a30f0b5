"""
In-memory response cache for backend reads with a fixed time-to-live.

Every read from the backend is looked up here first. Entries expire a fixed
number of seconds after they were stored, and every mutating call clears the
whole cache, so a write can never be followed by a stale read.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry:
    """A cached backend response and the time it was stored."""

    key: str
    value: Any
    stored_at: float


class ResponseCache:
    """
    Thread-safe TTL cache for unwrapped backend responses.

    Features:
    - Canonical request keys (endpoint plus sorted-key JSON of the params)
    - Fixed TTL checked on every lookup, expired entries evicted lazily
    - Wholesale invalidation via ``clear()``
    - Hit/miss statistics
    - Injectable clock for tests

    Example:
        >>> cache = ResponseCache(ttl_seconds=300)
        >>> key = cache.make_key("/finanzen/rechnungen", {"status": "offen"})
        >>> cache.set(key, [])
        >>> cache.get(key)
        []
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        enabled: bool = True,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Seconds an entry stays valid after it was stored
            enabled: When False, every lookup misses and nothing is stored
            clock: Monotonic time source, defaults to ``time.monotonic``
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than 0")

        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self._clock = clock or time.monotonic

        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

        self._stats = {
            "hits": 0,
            "misses": 0,
            "stores": 0,
            "expirations": 0,
            "clears": 0,
        }

        logger.debug(
            f"ResponseCache initialized (enabled={enabled}, ttl={ttl_seconds}s)"
        )

    @classmethod
    def from_config(cls, config: Any) -> "ResponseCache":
        """Build a cache from a ``FinanceClientConfig``."""
        return cls(
            ttl_seconds=config.cache_ttl_seconds,
            enabled=config.enable_response_cache,
        )

    @staticmethod
    def make_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Build the cache key for a request.

        Params are serialized with sorted keys, so two requests with the same
        params in a different order share one entry.

        Args:
            endpoint: Endpoint path relative to the API base URL
            params: Query parameters (None and {} are equivalent)

        Returns:
            Cache key string
        """
        serialized = json.dumps(dict(params or {}), sort_keys=True, default=str)
        return f"{endpoint}:{serialized}"

    def get(self, key: str) -> Optional[Any]:
        """
        Look up a fresh entry.

        Args:
            key: Key built by ``make_key``

        Returns:
            The cached value, or None when absent or expired
        """
        if not self.enabled:
            return None

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None

            if self._clock() - entry.stored_at >= self.ttl_seconds:
                del self._entries[key]
                self._stats["expirations"] += 1
                self._stats["misses"] += 1
                logger.debug(f"Cache entry expired: {key}")
                return None

            self._stats["hits"] += 1
            logger.debug(f"Cache hit: {key}")
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store a value, overwriting any existing entry for the key."""
        if not self.enabled:
            return

        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, stored_at=self._clock())
            self._stats["stores"] += 1

    def clear(self) -> None:
        """Evict all entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._stats["clears"] += 1

        if count:
            logger.debug(f"Cleared response cache ({count} entries)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_cache_statistics(self) -> Dict[str, Any]:
        """
        Get cache performance statistics.

        Returns:
            Dictionary with hit/miss counts, hit rate and current size
        """
        with self._lock:
            lookups = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / lookups * 100) if lookups > 0 else 0

            return {
                "enabled": self.enabled,
                "ttl_seconds": self.ttl_seconds,
                "lookups": lookups,
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "hit_rate_pct": round(hit_rate, 2),
                "stores": self._stats["stores"],
                "expirations": self._stats["expirations"],
                "clears": self._stats["clears"],
                "current_cache_size": len(self._entries),
            }
