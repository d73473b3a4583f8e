"""
YouTube metadata, transcript and channel listing access.
"""

from typing import Any, Dict, List, Optional, Tuple

from pytubefix import YouTube, Channel
from retry import retry
from youtube_transcript_api import YouTubeTranscriptApi, CouldNotRetrieveTranscript

from transcript_app.config import config
from transcript_app.utils.error_handling import YouTubeFetchError
from transcript_app.utils.logger import logging

SHORT_MAX_SECONDS = 60


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def _thumbnails(yt: YouTube) -> List[Dict[str, Any]]:
    url = yt.thumbnail_url
    return [{"url": url}] if url else []


def _upload_date(yt: YouTube) -> Optional[str]:
    publish_date = yt.publish_date
    return publish_date.date().isoformat() if publish_date else None


@retry(tries=config.YOUTUBE_RETRIES,
       delay=config.YOUTUBE_RETRY_DELAY,
       backoff=config.YOUTUBE_BACKOFF,
       logger=logging)
def _load_video(video_id: str) -> Dict[str, Any]:
    yt = YouTube(watch_url(video_id))
    return {
        "title": yt.title,
        "author": yt.author,
        "lengthSeconds": yt.length,
        "viewCount": yt.views,
        "uploadDate": _upload_date(yt),
        "description": yt.description or "",
        "thumbnails": _thumbnails(yt),
        "videoId": video_id,
    }


@retry(tries=config.YOUTUBE_RETRIES,
       delay=config.YOUTUBE_RETRY_DELAY,
       backoff=config.YOUTUBE_BACKOFF,
       logger=logging)
def _load_channel(url: str, limit: int) -> Dict[str, Any]:
    channel = Channel(url)
    videos = [
        {
            "videoId": yt.video_id,
            "title": yt.title,
            "author": yt.author,
            "lengthSeconds": yt.length,
            "viewCount": str(yt.views or 0),
            "uploadDate": _upload_date(yt),
            "thumbnails": _thumbnails(yt),
            "description": yt.description or "",
        }
        for yt in channel.videos[:limit]
    ]
    return {"channelName": channel.channel_name, "videos": videos}


class YouTubeClient:
    """Class to handle fetching video data from YouTube."""

    def __init__(self, transcript_api: Optional[YouTubeTranscriptApi] = None):
        """
        Initialize the client.

        Args:
            transcript_api: Transcript fetcher (created on demand if None)
        """
        self.transcript_api = transcript_api or YouTubeTranscriptApi()

    def get_video_info(self, video_id: str) -> Dict[str, Any]:
        """
        Extract metadata from a YouTube video.

        Returns:
            Video details keyed the way the API returns them
        """
        try:
            return _load_video(video_id)
        except Exception as e:
            logging.error(f"Error fetching video info for {video_id}: {str(e)}")
            raise YouTubeFetchError("Failed to fetch video information") from e

    def get_transcript(self, video_id: str, url: str = "") -> Tuple[List[Dict[str, Any]], bool]:
        """
        Fetch a video's transcript.

        Args:
            video_id: YouTube video ID
            url: The URL the user entered, used to recognise Shorts

        Returns:
            Segments as ``{text, offset, duration}`` in milliseconds, and
            whether the video is a Short

        Raises:
            YouTubeFetchError: 404 when the video has no captions
        """
        is_short = "/shorts/" in url
        if not is_short:
            try:
                is_short = (YouTube(watch_url(video_id)).length or 0) < SHORT_MAX_SECONDS
            except Exception as e:
                logging.warning(f"Could not read duration of {video_id}: {str(e)}")

        try:
            fetched = self.transcript_api.fetch(video_id)
            raw_segments = fetched.to_raw_data()
        except CouldNotRetrieveTranscript as e:
            logging.error(f"Transcript fetch error for {video_id}: {str(e)}")
            if is_short:
                raise YouTubeFetchError(
                    "YouTube Shorts typically don't have transcripts. Most Shorts creators don't add "
                    "captions, and YouTube doesn't auto-generate them for short videos.",
                    status_code=404,
                    is_short=True,
                ) from e
            raise YouTubeFetchError(
                "No transcript available for this video. The creator may not have enabled captions.",
                status_code=404,
                is_short=False,
            ) from e
        except Exception as e:
            logging.error(f"Error fetching transcript for {video_id}: {str(e)}")
            raise YouTubeFetchError(
                "Failed to fetch transcript. The video might not have captions available."
            ) from e

        if not raw_segments:
            if is_short:
                raise YouTubeFetchError(
                    "This Short doesn't have a transcript. YouTube Shorts rarely have captions.",
                    status_code=404,
                    is_short=True,
                )
            raise YouTubeFetchError("No transcript available for this video", status_code=404, is_short=False)

        transcript = [
            {
                "text": segment["text"],
                "offset": int(round(segment["start"] * 1000)),
                "duration": int(round(segment["duration"] * 1000)),
            }
            for segment in raw_segments
        ]
        return transcript, is_short

    def get_channel_videos(self, channel_url: str, limit: int = 10) -> Dict[str, Any]:
        """
        List a channel's most recent uploads.

        Args:
            channel_url: ``youtube.com/@handle`` or ``youtube.com/channel/<id>`` URL
            limit: Maximum number of videos

        Returns:
            Channel name and video summaries
        """
        if "/@" in channel_url:
            handle = channel_url.split("/@")[1].split("/")[0]
            url = f"https://www.youtube.com/@{handle}"
        elif "/channel/" in channel_url:
            channel_id = channel_url.split("/channel/")[1].split("/")[0]
            url = f"https://www.youtube.com/channel/{channel_id}"
        else:
            raise YouTubeFetchError("Invalid channel URL format", status_code=400)

        try:
            return _load_channel(url, limit)
        except Exception as e:
            logging.error(f"Error fetching channel videos for {channel_url}: {str(e)}")
            raise YouTubeFetchError("Failed to fetch channel videos") from e
