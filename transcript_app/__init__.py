"""
YouTube Transcript Application.

This application lets users fetch YouTube transcripts, keep them in a
personal library, and run AI tools (summaries, flashcards, chat,
translation) over the saved text.
"""

from transcript_app.config import config

__version__ = config.APP_VERSION
