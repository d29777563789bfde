"""
Document caches for the invite service.

A cache lives as long as the service instance that owns it, which is one
per process. Several API instances behind a load balancer do not see each
other's writes: run them with INVITE_CACHE_ENABLED=false (NullCache) or
put a shared key-value store behind the same get/set/invalidate interface.
"""
import copy
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class InMemoryCache:
    """Unbounded process-local cache keyed by document id, no TTL"""

    def __init__(self):
        self._entries: Dict[str, dict] = {}

    def get(self, key: str) -> Optional[dict]:
        value = self._entries.get(key)
        # Copies keep callers from mutating the cached document
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: dict) -> None:
        self._entries[key] = copy.deepcopy(value)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that never holds anything; every read goes to the store"""

    def get(self, key: str) -> Optional[dict]:
        return None

    def set(self, key: str, value: dict) -> None:
        pass

    def invalidate(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass

    def __contains__(self, key: str) -> bool:
        return False

    def __len__(self) -> int:
        return 0


def build_invite_cache(enabled: bool):
    if not enabled:
        logger.warning("Invite cache disabled - every read goes to MongoDB")
        return NullCache()
    return InMemoryCache()
