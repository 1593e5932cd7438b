"""
Account-scoped TTL caches.
Holds negotiated versions and authenticated sessions between calls.
"""

import threading
import time
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar


T = TypeVar('T')


class TTLCache(Generic[T]):
    """
    Thread-safe key/value cache with a fixed time-to-live.

    Each key holds a single value. Writers may race; the most recent put
    wins. Reads and writes are individually locked but nothing serializes
    the work that produces a value.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry in seconds
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        """Return the live entry for key, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
