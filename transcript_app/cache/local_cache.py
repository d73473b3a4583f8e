"""
Flat key-value storage and the namespaced expiring cache built on it.
"""

import json
from typing import Any, Callable, List, Optional

from sqlalchemy.orm import sessionmaker

from transcript_app.cache.models import LocalStorageItem, create_cache_engine
from transcript_app.config import config
from transcript_app.utils.helpers import now_ms
from transcript_app.utils.logger import logging


class LocalStorage:
    """
    String-keyed, string-valued storage shared by the whole client.

    Other parts of the application may keep their own keys here, so
    callers that own a subset of keys must namespace them.
    """

    def __init__(self, db_url: Optional[str] = None):
        self.db_url = db_url or config.CACHE_DB_URL
        self._engine = None
        self._session_factory = None

    def _session(self):
        if self._session_factory is None:
            self._engine = create_cache_engine(self.db_url)
            self._session_factory = sessionmaker(bind=self._engine)
        return self._session_factory()

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    def get_item(self, key: str) -> Optional[str]:
        with self._session() as session:
            item = session.get(LocalStorageItem, key)
            return item.value if item is not None else None

    def set_item(self, key: str, value: str) -> None:
        with self._session() as session:
            session.merge(LocalStorageItem(key=key, value=value))
            session.commit()

    def remove_item(self, key: str) -> None:
        with self._session() as session:
            session.query(LocalStorageItem).filter(LocalStorageItem.key == key).delete()
            session.commit()

    def keys(self) -> List[str]:
        with self._session() as session:
            return [row.key for row in session.query(LocalStorageItem.key).all()]

    def clear(self) -> None:
        with self._session() as session:
            session.query(LocalStorageItem).delete()
            session.commit()


class LocalStorageCache:
    """Expiring JSON cache for small payloads such as settings and lists."""

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        prefix: str = config.CACHE_PREFIX,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the cache.

        Args:
            storage: Backing storage, shared with unrelated keys
            prefix: Namespace for every key this cache writes
            clock: Callable returning the current time in epoch milliseconds
        """
        self.storage = storage or LocalStorage()
        self.prefix = prefix
        self._clock = clock or now_ms

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def set(self, key: str, value: Any, expiry_ms: int = config.CACHE_EXPIRY_MS) -> None:
        """
        Cache a JSON-serializable value.

        Args:
            key: Cache key
            value: Value to cache
            expiry_ms: Lifetime of this entry in milliseconds (default: 24 hours)
        """
        data = {
            "value": value,
            "timestamp": self._clock(),
            "expiry": expiry_ms,
            "version": config.CACHE_VERSION,
        }
        self.storage.set_item(self._key(key), json.dumps(data))

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value.

        Returns:
            The value, or None if absent, expired or unreadable. Expired
            and unreadable entries are removed.
        """
        item = self.storage.get_item(self._key(key))
        if item is None:
            return None

        try:
            data = json.loads(item)
            expired = self._clock() - data["timestamp"] > data["expiry"]
        except (ValueError, TypeError, KeyError):
            logging.warning(f"Discarding unreadable cache entry {self._key(key)}")
            self.remove(key)
            return None

        if expired:
            self.remove(key)
            return None

        return data.get("value")

    def remove(self, key: str) -> None:
        self.storage.remove_item(self._key(key))

    def clear(self) -> None:
        """Remove every key under this cache's prefix, leaving other keys alone."""
        namespace = f"{self.prefix}:"
        for key in self.storage.keys():
            if key.startswith(namespace):
                self.storage.remove_item(key)
