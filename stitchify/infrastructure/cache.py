from __future__ import annotations

import time
from typing import Dict, Optional, Tuple

from ..config import SETTINGS

CacheEntry = Tuple[float, bytes]

MAX_ENTRIES = 16


class ResponseCache:
    """Small TTL cache of rendered PNG bytes, evicting the oldest entry when full."""

    def __init__(self, max_entries: int = MAX_ENTRIES) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._max_entries = max_entries

    def get(self, key: str) -> Optional[bytes]:
        entry = self._entries.get(key)
        if not entry:
            return None
        timestamp, data = entry
        if time.time() - timestamp > SETTINGS.cache_ttl:
            self._entries.pop(key, None)
            return None
        return data

    def put(self, key: str, data: bytes) -> None:
        if key not in self._entries and len(self._entries) >= self._max_entries:
            oldest = min(self._entries.items(), key=lambda item: item[1][0])[0]
            self._entries.pop(oldest, None)
        self._entries[key] = (time.time(), data)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


CACHE = ResponseCache()
