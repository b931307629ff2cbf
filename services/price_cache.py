# services/price_cache.py
"""
Time-boxed memoization for provider responses.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    timestamp: float


def make_cache_key(kind: str, symbol: str, *params) -> str:
    """Deterministic key from the logical request (endpoint kind, symbol, extra params)."""
    parts = [kind, symbol.strip().upper()]
    parts.extend(str(p) for p in params if p is not None)
    return '_'.join(parts)


class PriceCache:
    """
    TTL cache with lazy eviction: stale entries are dropped when read,
    there is no background sweep and no size bound.
    """

    def __init__(self, ttl_seconds: float, name: str = 'cache',
                 clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock() - entry.timestamp >= self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"[{self.name}] expired: {key}")
                return None
            logger.debug(f"[{self.name}] hit: {key}")
            return entry.data

    def set(self, key: str, data: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(data=data, timestamp=self.clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
