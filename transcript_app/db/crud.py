"""
CRUD operations for the transcript backend database.
"""

import datetime
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session

from transcript_app.db.models import User, Transcript, AISettings, Memory
from transcript_app.utils.logger import logging

# Wire field name -> column name
TRANSCRIPT_FIELDS = {
    "videoId": "video_id",
    "title": "title",
    "author": "author",
    "lengthSeconds": "length_seconds",
    "viewCount": "view_count",
    "uploadDate": "upload_date",
    "description": "description",
    "thumbnails": "thumbnails",
    "transcript": "transcript",
}

AI_SETTINGS_FIELDS = {
    "groqApiKey": "groq_api_key",
    "geminiApiKey": "gemini_api_key",
    "groqUnlocked": "groq_unlocked",
    "geminiUnlocked": "gemini_unlocked",
}

MEMORY_FIELDS = {
    "transcriptId": "transcript_id",
    "type": "type",
    "title": "title",
    "videoTitle": "video_title",
    "toolName": "tool_name",
    "result": "result",
    "cards": "cards",
    "messages": "messages",
    "metadata": "extra",
}


def _columns(data: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    """Map known wire fields to column values, dropping anything else."""
    return {column: data[field] for field, column in fields.items() if field in data}


# Users

def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email, case-insensitively."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(db: Session, email: str, password_hash: Optional[str] = None, name: str = "",
                photo_url: str = "", google_id: Optional[str] = None) -> User:
    """Create a new account."""
    user = User(
        email=email.strip().lower(),
        password=password_hash,
        name=name or "",
        photo_url=photo_url or "",
        google_id=google_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, **fields: Any) -> User:
    """Set the given attributes on a user."""
    for key, value in fields.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


# Transcripts

def create_transcript(db: Session, user_id: int, data: Dict[str, Any]) -> Transcript:
    """Save a transcript to a user's library."""
    transcript = Transcript(user_id=user_id, **_columns(data, TRANSCRIPT_FIELDS))
    db.add(transcript)
    db.commit()
    db.refresh(transcript)
    return transcript


def get_transcripts(db: Session, user_id: int) -> List[Transcript]:
    """Get a user's transcripts, newest first."""
    return db.query(Transcript).filter(
        Transcript.user_id == user_id
    ).order_by(Transcript.created_at.desc(), Transcript.id.desc()).all()


def delete_transcript(db: Session, user_id: int, transcript_id: int) -> bool:
    """Delete one of a user's transcripts. Returns False if it was not found."""
    transcript = db.query(Transcript).filter(
        Transcript.id == transcript_id,
        Transcript.user_id == user_id
    ).first()
    if not transcript:
        return False

    db.delete(transcript)
    db.commit()
    return True


def delete_all_transcripts(db: Session, user_id: int) -> int:
    """Delete every transcript of a user and return how many were removed."""
    count = db.query(Transcript).filter(Transcript.user_id == user_id).delete()
    db.commit()
    logging.info(f"Deleted {count} transcripts for user {user_id}")
    return count


# AI settings

def get_or_create_ai_settings(db: Session, user_id: int) -> AISettings:
    """Get a user's AI settings, creating the defaults on first access."""
    settings = db.query(AISettings).filter(AISettings.user_id == user_id).first()
    if settings:
        return settings

    settings = AISettings(user_id=user_id)
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


def update_ai_settings(db: Session, user_id: int, data: Dict[str, Any]) -> AISettings:
    """Upsert a user's AI settings."""
    settings = get_or_create_ai_settings(db, user_id)
    for column, value in _columns(data, AI_SETTINGS_FIELDS).items():
        setattr(settings, column, value)
    settings.updated_at = datetime.datetime.utcnow()
    db.commit()
    db.refresh(settings)
    return settings


# Memories

def create_memory(db: Session, user_id: int, data: Dict[str, Any]) -> Memory:
    """Save an AI tool output."""
    memory = Memory(user_id=user_id, **_columns(data, MEMORY_FIELDS))
    db.add(memory)
    db.commit()
    db.refresh(memory)
    logging.info(
        f"Saved memory {memory.id} of type {memory.type} "
        f"({len(memory.messages or [])} messages, {len(memory.cards or [])} cards)"
    )
    return memory


def get_memories(db: Session, user_id: int) -> List[Memory]:
    """Get a user's memories, newest first."""
    return db.query(Memory).filter(
        Memory.user_id == user_id
    ).order_by(Memory.created_at.desc(), Memory.id.desc()).all()


def delete_memory(db: Session, user_id: int, memory_id: int) -> bool:
    """Delete one of a user's memories. Returns False if it was not found."""
    memory = db.query(Memory).filter(
        Memory.id == memory_id,
        Memory.user_id == user_id
    ).first()
    if not memory:
        return False

    db.delete(memory)
    db.commit()
    return True
