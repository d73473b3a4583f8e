"""
Structured cache for fetched videos and channel listings.

Entries live in two tables of an embedded database: ``videos`` keyed by
video ID and ``channels`` keyed by channel URL. Each entry is stamped with
its creation time; a read that finds an entry older than its lifetime
deletes it and reports a miss.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import sessionmaker

from transcript_app.cache.models import VideoEntry, ChannelEntry, create_cache_engine
from transcript_app.config import config
from transcript_app.utils.helpers import now_ms
from transcript_app.utils.logger import logging


@dataclass(frozen=True)
class CachedVideoRecord:
    video_id: str
    video_info: Dict[str, Any]
    transcript: List[Dict[str, Any]]
    timestamp: int
    schema_version: str


@dataclass(frozen=True)
class CachedChannelRecord:
    channel_url: str
    channel_data: Dict[str, Any]
    timestamp: int
    schema_version: str


class CacheStore:
    """Expiring cache of videos (24h) and channel listings (12h)."""

    def __init__(self, db_url: Optional[str] = None, clock: Optional[Callable[[], int]] = None):
        """
        Initialize the cache store. The database is opened on first use.

        Args:
            db_url: SQLAlchemy URL of the cache database
            clock: Callable returning the current time in epoch milliseconds
        """
        self.db_url = db_url or config.CACHE_DB_URL
        self.video_expiry_ms = config.CACHE_EXPIRY_MS
        self.channel_expiry_ms = config.CHANNEL_CACHE_EXPIRY_MS
        self._clock = clock or now_ms
        self._engine = None
        self._session_factory = None

    def _session(self):
        if self._session_factory is None:
            self._engine = create_cache_engine(self.db_url)
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
            logging.debug(f"Opened cache store at {self.db_url}")
        return self._session_factory()

    def close(self) -> None:
        """Dispose of the database connection, if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    # Video cache methods

    def cache_video(self, video_id: str, video_info: Dict[str, Any], transcript: List[Dict[str, Any]]) -> None:
        """
        Store a video's info and transcript, replacing any existing entry.

        Args:
            video_id: YouTube video ID
            video_info: Video metadata as returned by the backend
            transcript: Ordered transcript segments
        """
        with self._session() as session:
            session.merge(VideoEntry(
                video_id=video_id,
                video_info=video_info,
                transcript=transcript,
                timestamp=self._clock(),
                version=config.CACHE_VERSION,
            ))
            session.commit()
        logging.debug(f"Cached video {video_id}")

    def get_video(self, video_id: str) -> Optional[CachedVideoRecord]:
        """
        Get a cached video.

        Args:
            video_id: YouTube video ID

        Returns:
            The cached record, or None if absent or expired. An expired
            entry is deleted as part of the read.
        """
        with self._session() as session:
            entry = session.get(VideoEntry, video_id)
            if entry is None:
                return None

            if self._clock() - entry.timestamp > self.video_expiry_ms:
                session.delete(entry)
                session.commit()
                logging.info(f"Cached video {video_id} expired and was removed")
                return None

            return CachedVideoRecord(
                video_id=entry.video_id,
                video_info=entry.video_info,
                transcript=entry.transcript,
                timestamp=entry.timestamp,
                schema_version=entry.version,
            )

    def delete_video(self, video_id: str) -> None:
        """Remove a cached video; a missing entry is not an error."""
        with self._session() as session:
            session.query(VideoEntry).filter(VideoEntry.video_id == video_id).delete()
            session.commit()

    # Channel cache methods

    def cache_channel(self, channel_url: str, channel_data: Dict[str, Any]) -> None:
        """Store a channel listing, replacing any existing entry."""
        with self._session() as session:
            session.merge(ChannelEntry(
                channel_url=channel_url,
                channel_data=channel_data,
                timestamp=self._clock(),
                version=config.CACHE_VERSION,
            ))
            session.commit()
        logging.debug(f"Cached channel {channel_url}")

    def get_channel(self, channel_url: str) -> Optional[CachedChannelRecord]:
        """
        Get a cached channel listing.

        Channel listings go stale faster than transcripts, so they expire
        after half the video lifetime.
        """
        with self._session() as session:
            entry = session.get(ChannelEntry, channel_url)
            if entry is None:
                return None

            if self._clock() - entry.timestamp > self.channel_expiry_ms:
                session.delete(entry)
                session.commit()
                logging.info(f"Cached channel {channel_url} expired and was removed")
                return None

            return CachedChannelRecord(
                channel_url=entry.channel_url,
                channel_data=entry.channel_data,
                timestamp=entry.timestamp,
                schema_version=entry.version,
            )

    def delete_channel(self, channel_url: str) -> None:
        """Remove a cached channel listing; a missing entry is not an error."""
        with self._session() as session:
            session.query(ChannelEntry).filter(ChannelEntry.channel_url == channel_url).delete()
            session.commit()

    def clear_all(self) -> None:
        """Empty both the video and channel caches."""
        with self._session() as session:
            session.query(VideoEntry).delete()
            session.query(ChannelEntry).delete()
            session.commit()
        logging.info("Cleared video and channel caches")

    def get_cache_info(self) -> Dict[str, int]:
        """
        Count cached entries.

        Entries that have expired but were not read since are still counted.
        """
        with self._session() as session:
            return {
                "videoCount": session.query(VideoEntry).count(),
                "channelCount": session.query(ChannelEntry).count(),
            }
