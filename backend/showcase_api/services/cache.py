import time
from typing import Dict, Optional, Tuple

from loguru import logger

from ..config import get_settings


class ResponseCache:
    """Upstream response bodies keyed by request URL, bounded by TTL and total size."""

    def __init__(self, max_bytes: Optional[int] = None, ttl_seconds: Optional[int] = None):
        settings = get_settings()
        self.max_bytes = settings.cache_max_bytes if max_bytes is None else max_bytes
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        # insertion ordered, so the first key is always the oldest entry
        self.store: Dict[str, Tuple[float, str]] = {}
        self.size = 0

    def __len__(self) -> int:
        return len(self.store)

    def get(self, key: str) -> Optional[str]:
        entry = self.store.get(key)
        if not entry:
            return None
        expires_at, value = entry
        if time.time() > expires_at:
            self._drop(key)
            return None
        return value

    def set(self, key: str, value: str):
        weight = _weight(value)
        if weight > self.max_bytes:
            logger.debug(f"[cache] {key} is larger than the cache ({weight} bytes), not stored")
            return
        self._drop(key)
        self.store[key] = (time.time() + self.ttl_seconds, value)
        self.size += weight
        while self.size > self.max_bytes:
            oldest = next(iter(self.store))
            logger.debug(f"[cache] evicting {oldest}")
            self._drop(oldest)

    def clear(self):
        self.store.clear()
        self.size = 0

    def _drop(self, key: str):
        entry = self.store.pop(key, None)
        if entry:
            self.size -= _weight(entry[1])


def _weight(value: str) -> int:
    return len(value.encode("utf-8"))
