"""
Client-side caches.

- store.py: CacheStore, the structured cache for fetched videos and
  channel listings (24h / 12h lifetimes)
- local_cache.py: LocalStorage, the flat key-value storage shared by the
  client, and LocalStorageCache, the namespaced expiring JSON cache on top
  of it used for list-shaped API responses

Expired entries are removed when they are next read; nothing sweeps them
in the background.
"""

from transcript_app.cache.store import CacheStore, CachedVideoRecord, CachedChannelRecord
from transcript_app.cache.local_cache import LocalStorage, LocalStorageCache

__all__ = [
    "CacheStore",
    "CachedVideoRecord",
    "CachedChannelRecord",
    "LocalStorage",
    "LocalStorageCache",
]
