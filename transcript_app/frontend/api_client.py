"""
API client for communicating with the YouTube transcript backend.
"""

import requests
from typing import Dict, List, Any, Optional

from transcript_app.cache.local_cache import LocalStorageCache
from transcript_app.config import config
from transcript_app.utils.error_handling import ApiError, BackendUnavailableError
from transcript_app.utils.logger import logging

TRANSCRIPTS_KEY = "transcripts"
MEMORIES_KEY = "memories"
AI_SETTINGS_KEY = "ai-settings"


class RemoteAPIClient:
    """Client for interacting with the YouTube transcript API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        local_cache: Optional[LocalStorageCache] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the backend
            local_cache: Cache for the list-shaped responses
            session: HTTP session; its cookie jar carries the backend's
                session cookie between requests
        """
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.local_cache = local_cache or LocalStorageCache()
        self.session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        """Get the full URL for an endpoint."""
        return f"{self.base_url}{endpoint}"

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send a request to the backend and return the decoded JSON body.

        Args:
            endpoint: Path starting with ``/api``
            method: HTTP method
            json: Request body
            headers: Extra headers, merged over the JSON content type

        Returns:
            Decoded response body

        Raises:
            BackendUnavailableError: The server is unreachable or did not answer with JSON
            ApiError: The server answered with a non-2xx status
        """
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = self.session.request(
                method,
                self._url(endpoint),
                json=json,
                headers=request_headers,
            )
        except requests.RequestException as e:
            logging.error(f"Cannot reach backend at {self.base_url}: {e}")
            raise BackendUnavailableError(
                f"Cannot connect to server. Make sure backend is running on {self.base_url}"
            ) from e

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logging.error(f"{method} {endpoint} returned non-JSON content type '{content_type}'")
            raise BackendUnavailableError(
                "Backend server is not responding. Make sure to run: python run_api.py"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise BackendUnavailableError(
                "Backend server is not responding. Make sure to run: python run_api.py"
            ) from e

        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            logging.warning(f"{method} {endpoint} failed with {response.status_code}: {message}")
            raise ApiError(message or "Request failed", status_code=response.status_code)

        return data

    def _cached_get(self, key: str, endpoint: str, expiry_ms: int) -> Any:
        cached = self.local_cache.get(key)
        if cached is not None:
            logging.debug(f"Cache hit for {key}")
            return cached

        data = self.request(endpoint)
        self.local_cache.set(key, data, expiry_ms)
        return data

    # Auth

    def sign_up(self, email: str, password: str, name: str = "") -> Dict[str, Any]:
        return self.request("/api/auth/signup", method="POST",
                            json={"email": email, "password": password, "name": name})

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        return self.request("/api/auth/signin", method="POST",
                            json={"email": email, "password": password})

    def google_sign_in(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sign in with a Google identity already verified by the OAuth flow.

        Args:
            user_data: ``email``, ``name``, ``photoURL`` and ``googleId``
        """
        return self.request("/api/auth/google", method="POST", json=user_data)

    def get_current_user(self) -> Dict[str, Any]:
        return self.request("/api/auth/me")

    def sign_out(self) -> Dict[str, Any]:
        return self.request("/api/auth/signout", method="POST")

    # User profile

    def get_profile(self) -> Dict[str, Any]:
        return self.request("/api/user/profile")

    def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("/api/user/profile", method="PUT", json=data)

    # Transcripts

    def save_transcript(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Save a transcript to the user's library."""
        result = self.request("/api/transcripts", method="POST", json=data)
        self.local_cache.remove(TRANSCRIPTS_KEY)
        return result

    def get_transcripts(self) -> List[Dict[str, Any]]:
        """
        Get the user's saved transcripts, newest first.

        Served from the local cache for five minutes after a fetch.
        """
        return self._cached_get(TRANSCRIPTS_KEY, "/api/transcripts", config.TRANSCRIPTS_CACHE_MS)

    def delete_transcript(self, transcript_id: Any) -> Dict[str, Any]:
        result = self.request(f"/api/transcripts/{transcript_id}", method="DELETE")
        self.local_cache.remove(TRANSCRIPTS_KEY)
        return result

    def delete_all_transcripts(self) -> Dict[str, Any]:
        result = self.request("/api/transcripts", method="DELETE")
        self.local_cache.remove(TRANSCRIPTS_KEY)
        return result

    # AI settings

    def get_ai_settings(self) -> Dict[str, Any]:
        """Get the user's AI settings, cached for ten minutes."""
        return self._cached_get(AI_SETTINGS_KEY, "/api/ai-settings", config.AI_SETTINGS_CACHE_MS)

    def update_ai_settings(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update the AI settings and cache the updated value."""
        result = self.request("/api/ai-settings", method="PUT", json=data)
        self.local_cache.set(AI_SETTINGS_KEY, result, config.AI_SETTINGS_CACHE_MS)
        return result

    # Memories

    def save_memory(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Save the output of an AI tool."""
        result = self.request("/api/memories", method="POST", json=data)
        self.local_cache.remove(MEMORIES_KEY)
        return result

    def get_memories(self) -> List[Dict[str, Any]]:
        """Get the user's saved AI outputs, cached for five minutes."""
        return self._cached_get(MEMORIES_KEY, "/api/memories", config.MEMORIES_CACHE_MS)

    def delete_memory(self, memory_id: Any) -> Dict[str, Any]:
        result = self.request(f"/api/memories/{memory_id}", method="DELETE")
        self.local_cache.remove(MEMORIES_KEY)
        return result

    # Video and channel

    def get_video_info(self, url: str) -> Dict[str, Any]:
        """
        Get metadata for a video.

        Args:
            url: YouTube video URL

        Returns:
            Title, author, duration, view count, upload date, description,
            thumbnails and video ID
        """
        return self.request("/api/video-info", method="POST", json={"url": url})

    def get_transcript(self, url: str) -> Dict[str, Any]:
        """
        Fetch the transcript of a video.

        Returns:
            ``{"transcript": [...], "isShort": bool}``
        """
        return self.request("/api/transcript", method="POST", json={"url": url})

    def get_channel_videos(self, channel_url: str, limit: int = 10) -> Dict[str, Any]:
        """
        List a channel's most recent videos.

        Args:
            channel_url: ``/@handle`` or ``/channel/<id>`` URL
            limit: Maximum number of videos

        Returns:
            ``{"channelName": str, "videos": [...]}``
        """
        return self.request("/api/channel-videos", method="POST",
                            json={"channelUrl": channel_url, "limit": limit})
