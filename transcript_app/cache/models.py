"""
SQLAlchemy tables backing the client-side caches.
"""

from sqlalchemy import Column, String, Text, BigInteger, JSON, create_engine
from sqlalchemy.orm import declarative_base

CacheBase = declarative_base()


class VideoEntry(CacheBase):
    """A fetched video: its info and transcript segments."""
    __tablename__ = "videos"

    video_id = Column(String(20), primary_key=True)
    video_info = Column(JSON, nullable=True)
    transcript = Column(JSON, nullable=True)
    timestamp = Column(BigInteger, nullable=False, index=True)
    version = Column(String(10), nullable=False)

    def __repr__(self):
        return f"<VideoEntry(video_id='{self.video_id}', timestamp={self.timestamp})>"


class ChannelEntry(CacheBase):
    """A fetched channel listing."""
    __tablename__ = "channels"

    channel_url = Column(String(512), primary_key=True)
    channel_data = Column(JSON, nullable=True)
    timestamp = Column(BigInteger, nullable=False, index=True)
    version = Column(String(10), nullable=False)

    def __repr__(self):
        return f"<ChannelEntry(channel_url='{self.channel_url}', timestamp={self.timestamp})>"


class LocalStorageItem(CacheBase):
    """One raw string entry of the shared flat key-value storage."""
    __tablename__ = "local_storage"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return f"<LocalStorageItem(key='{self.key}')>"


def create_cache_engine(db_url: str):
    """Open an engine for the cache database and create missing tables."""
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False} if db_url.startswith("sqlite") else {}
    )
    CacheBase.metadata.create_all(bind=engine)
    return engine
