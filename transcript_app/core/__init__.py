"""
Core functionality for the YouTube transcript application.

This package contains the YouTube access layer used by the backend and
the AI tools that run over saved transcripts.
"""
