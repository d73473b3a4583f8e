"""
Fetching videos and channel listings with the structured cache in front
of the backend.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from transcript_app.cache.local_cache import LocalStorageCache
from transcript_app.cache.store import CacheStore
from transcript_app.frontend.api_client import RemoteAPIClient
from transcript_app.utils.helpers import (
    extract_video_id,
    save_export,
    transcript_to_json,
    transcript_to_srt,
    transcript_to_txt,
)
from transcript_app.utils.logger import logging


@dataclass
class LoadedVideo:
    video_id: str
    video_info: Dict[str, Any]
    transcript: List[Dict[str, Any]]
    from_cache: bool


@dataclass
class LoadedChannel:
    channel_url: str
    channel_data: Dict[str, Any]
    from_cache: bool


class TranscriptLoader:
    """Loads videos and channels, consulting the CacheStore before the backend."""

    def __init__(self, client: RemoteAPIClient, cache_store: CacheStore, local_cache: LocalStorageCache):
        self.client = client
        self.cache_store = cache_store
        self.local_cache = local_cache

    def fetch_video(self, url: str) -> LoadedVideo:
        """
        Get a video's info and transcript.

        Args:
            url: YouTube video URL (watch, youtu.be, embed or Shorts)

        Returns:
            LoadedVideo, flagged with whether it came from the cache

        Raises:
            ValueError: The URL does not contain a video ID
        """
        video_id = extract_video_id(url)
        if not video_id:
            raise ValueError("Invalid YouTube URL")

        cached = self.cache_store.get_video(video_id)
        if cached:
            logging.info(f"Loaded video {video_id} from cache")
            return LoadedVideo(video_id, cached.video_info, cached.transcript, from_cache=True)

        info = self.client.get_video_info(url)
        transcript_data = self.client.get_transcript(url)
        transcript = transcript_data["transcript"]

        self.cache_store.cache_video(video_id, info, transcript)
        return LoadedVideo(video_id, info, transcript, from_cache=False)

    def fetch_channel(self, channel_url: str, limit: int = 10) -> LoadedChannel:
        """Get a channel's recent videos, from the cache when fresh."""
        cached = self.cache_store.get_channel(channel_url)
        if cached:
            logging.info(f"Loaded channel {channel_url} from cache")
            return LoadedChannel(channel_url, cached.channel_data, from_cache=True)

        data = self.client.get_channel_videos(channel_url, limit)
        self.cache_store.cache_channel(channel_url, data)
        return LoadedChannel(channel_url, data, from_cache=False)

    def fetch_channel_video(self, video: Dict[str, Any]) -> LoadedVideo:
        """Load one entry of a channel listing."""
        return self.fetch_video(f"https://www.youtube.com/watch?v={video['videoId']}")

    def cache_info(self) -> Dict[str, int]:
        return self.cache_store.get_cache_info()

    def clear_cache(self) -> None:
        """Drop every cached video, channel and API response."""
        self.cache_store.clear_all()
        self.local_cache.clear()

    def export(self, video: LoadedVideo, fmt: str = "txt", filepath: Optional[str] = None) -> str:
        """
        Render a loaded transcript for download.

        Args:
            video: Video returned by ``fetch_video``
            fmt: ``srt``, ``txt`` or ``json``
            filepath: If given, the export is also written there

        Returns:
            The rendered export
        """
        if fmt == "srt":
            content = transcript_to_srt(video.transcript)
        elif fmt == "txt":
            content = transcript_to_txt(video.transcript)
        elif fmt == "json":
            content = transcript_to_json(video.transcript, video.video_info)
        else:
            raise ValueError(f"Unsupported export format: {fmt}")

        if filepath:
            save_export(content, filepath)
            logging.info(f"Exported {video.video_id} as {fmt} to {filepath}")
        return content
