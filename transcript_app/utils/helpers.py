"""
Helper utility functions for the YouTube transcript application.
"""

import json
import re
import time
import datetime
from typing import Dict, Any, List, Optional


VIDEO_URL_PATTERN = re.compile(
    r'(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^"&?/\s]{11})'
)
SHORTS_URL_PATTERN = re.compile(r'youtube\.com/shorts/([^"&?/\s]{11})')

DEFAULT_SEGMENT_DURATION_MS = 2000


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the 11-character video ID from a YouTube URL.

    Handles watch, embed, ``/v/``, youtu.be and Shorts URLs.

    Args:
        url: YouTube URL

    Returns:
        Video ID or None if the URL is not recognised
    """
    if not url:
        return None

    for pattern in (VIDEO_URL_PATTERN, SHORTS_URL_PATTERN):
        match = pattern.search(url)
        if match:
            return match.group(1)

    return None


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def format_srt_time(ms: int) -> str:
    """Format a millisecond offset as an SRT timestamp (HH:MM:SS,mmm)."""
    ms = int(ms)
    total_seconds = ms // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    milliseconds = ms % 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{milliseconds:03d}"


def transcript_to_srt(transcript: List[Dict[str, Any]]) -> str:
    """
    Render transcript segments as SubRip subtitles.

    Args:
        transcript: Segments with ``text``, ``offset`` and ``duration`` (ms)

    Returns:
        SRT document
    """
    blocks = []
    for index, item in enumerate(transcript, start=1):
        offset = item.get("offset", 0)
        duration = item.get("duration") or DEFAULT_SEGMENT_DURATION_MS
        start = format_srt_time(offset)
        end = format_srt_time(offset + duration)
        blocks.append(f"{index}\n{start} --> {end}\n{item.get('text', '')}\n\n")
    return "".join(blocks)


def transcript_to_txt(transcript: List[Dict[str, Any]]) -> str:
    """Join segment texts, one per line."""
    return "\n".join(item.get("text", "") for item in transcript)


def transcript_to_json(transcript: List[Dict[str, Any]], video_info: Optional[Dict[str, Any]] = None) -> str:
    """Serialize the transcript with its video info and an export timestamp."""
    data = {
        "videoInfo": video_info,
        "transcript": transcript,
        "exportedAt": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def save_export(content: str, filepath: str) -> None:
    """
    Write exported transcript text to a file.

    Args:
        content: Rendered export
        filepath: Path to save the file
    """
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(content)
