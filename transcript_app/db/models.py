"""
SQLAlchemy models for the transcript backend database.
"""

import datetime
from typing import Dict, Any
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Boolean, JSON, Index
from sqlalchemy.orm import relationship

from transcript_app.db.database import Base

MEMORY_TYPES = ("chat", "questions", "flashcards", "summary", "keypoints", "rewrite", "translate")


def _isoformat(value):
    return value.isoformat() if value else None


class User(Base):
    """Model representing an account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=True)  # bcrypt hash, empty for Google-only accounts
    name = Column(String(255), default="")
    photo_url = Column(String(1024), default="")
    google_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    transcripts = relationship("Transcript", back_populates="user", cascade="all, delete-orphan")
    memories = relationship("Memory", back_populates="user", cascade="all, delete-orphan")
    ai_settings = relationship("AISettings", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def public_dict(self) -> Dict[str, Any]:
        """Fields returned by the auth endpoints."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name or "",
            "photoURL": self.photo_url or "",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.public_dict(),
            "googleId": self.google_id,
            "createdAt": _isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class Transcript(Base):
    """Model representing a transcript saved to a user's library."""
    __tablename__ = "transcripts"
    __table_args__ = (Index("ix_transcripts_user_created", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(String(20), nullable=False)
    title = Column(String(512), nullable=False)
    author = Column(String(255), nullable=True)
    length_seconds = Column(Integer, nullable=True)
    view_count = Column(String(50), nullable=True)
    upload_date = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    thumbnails = Column(JSON, nullable=True)
    transcript = Column(JSON, nullable=True)  # [{text, offset, duration}]
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="transcripts")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "videoId": self.video_id,
            "title": self.title,
            "author": self.author,
            "lengthSeconds": self.length_seconds,
            "viewCount": self.view_count,
            "uploadDate": self.upload_date,
            "description": self.description,
            "thumbnails": self.thumbnails,
            "transcript": self.transcript or [],
            "createdAt": _isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Transcript(id={self.id}, video_id='{self.video_id}')>"


class AISettings(Base):
    """Model representing a user's AI provider settings."""
    __tablename__ = "ai_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    groq_api_key = Column(String(255), nullable=True)
    gemini_api_key = Column(String(255), nullable=True)
    groq_unlocked = Column(Boolean, default=False)
    gemini_unlocked = Column(Boolean, default=False)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="ai_settings")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "groqApiKey": self.groq_api_key,
            "geminiApiKey": self.gemini_api_key,
            "groqUnlocked": bool(self.groq_unlocked),
            "geminiUnlocked": bool(self.gemini_unlocked),
            "updatedAt": _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<AISettings(id={self.id}, user_id={self.user_id})>"


class Memory(Base):
    """Model representing a saved AI tool output."""
    __tablename__ = "memories"
    __table_args__ = (Index("ix_memories_user_created", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    transcript_id = Column(Integer, ForeignKey("transcripts.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(20), nullable=False)
    title = Column(String(512), nullable=False)
    video_title = Column(String(512), nullable=True)
    tool_name = Column(String(100), nullable=True)
    result = Column(Text, nullable=True)
    cards = Column(JSON, nullable=True)  # flashcards and questions
    messages = Column(JSON, nullable=True)  # chat conversations
    extra = Column("metadata", JSON, nullable=True)  # provider, model, options
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="memories")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "transcriptId": self.transcript_id,
            "type": self.type,
            "title": self.title,
            "videoTitle": self.video_title,
            "toolName": self.tool_name,
            "result": self.result,
            "cards": self.cards or [],
            "messages": self.messages or [],
            "metadata": self.extra,
            "createdAt": _isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Memory(id={self.id}, type='{self.type}')>"
