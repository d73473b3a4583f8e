"""
Centralized error types for the application.
"""

from typing import Optional


class TranscriptAppError(Exception):
    """Base class for application errors."""


class ApiError(TranscriptAppError):
    """The backend answered with a JSON error payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BackendUnavailableError(TranscriptAppError):
    """The backend could not be reached or did not answer with JSON."""


class YouTubeFetchError(TranscriptAppError):
    """Video information, transcript or channel listing could not be fetched."""

    def __init__(self, message: str, status_code: int = 500, is_short: Optional[bool] = None):
        super().__init__(message)
        self.status_code = status_code
        self.is_short = is_short


class AIServiceError(TranscriptAppError):
    """The AI provider call failed."""
