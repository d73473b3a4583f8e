"""
Configuration settings for the YouTube transcript application.
"""

import os
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "YouTube Transcript App"
    APP_VERSION = "1.0.0"

    # Data directories
    BASE_DIR = Path(__file__).resolve().parent.parent.absolute()
    DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

    # Backend
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/transcript_app.db")
    SESSION_SECRET = os.getenv("SESSION_SECRET", "your-secret-key-change-in-production")
    SESSION_MAX_AGE = 24 * 60 * 60  # seconds
    CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173").rstrip("/")
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3001"))

    # YouTube page fetches
    YOUTUBE_RETRIES = int(os.getenv("YOUTUBE_RETRIES", "3"))
    YOUTUBE_RETRY_DELAY = float(os.getenv("YOUTUBE_RETRY_DELAY", "1"))
    YOUTUBE_BACKOFF = 2

    # Client side
    API_URL = os.getenv("API_URL", "http://localhost:3001")
    CACHE_DB_URL = os.getenv("CACHE_DB_URL", f"sqlite:///{DATA_DIR}/client_cache.db")
    CACHE_PREFIX = "yt-transcript"
    CACHE_VERSION = "v1"

    # Cache lifetimes in milliseconds
    CACHE_EXPIRY_MS = 24 * 60 * 60 * 1000
    CHANNEL_CACHE_EXPIRY_MS = CACHE_EXPIRY_MS // 2
    TRANSCRIPTS_CACHE_MS = 5 * 60 * 1000
    MEMORIES_CACHE_MS = 5 * 60 * 1000
    AI_SETTINGS_CACHE_MS = 10 * 60 * 1000

    # AI providers
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    DEFAULT_GROQ_MODEL = os.getenv("DEFAULT_GROQ_MODEL", "llama-3.3-70b-versatile")
    DEFAULT_GEMINI_MODEL = os.getenv("DEFAULT_GEMINI_MODEL", "gemini-2.0-flash")
    TEMPERATURE = 0.7
    MAX_TOKENS = 2048

    # Access codes unlocking the shared provider keys
    ACCESS_CODES = {
        "groq": (os.getenv("GROQ_ACCESS_CODE_1"), os.getenv("GROQ_ACCESS_CODE_2")),
        "gemini": (os.getenv("GEMINI_ACCESS_CODE_1"), os.getenv("GEMINI_ACCESS_CODE_2")),
    }

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)

        if not cls.GROQ_API_KEY and not cls.GEMINI_API_KEY:
            print("WARNING: neither GROQ_API_KEY nor GEMINI_API_KEY is set.")
            print("AI tools will only work with keys saved in the user's AI settings.")


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"
    SECURE_COOKIES = False


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"
    SECURE_COOKIES = True


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
