"""
API routes for the YouTube transcript backend.
"""

from typing import Any, Dict

import bcrypt
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from transcript_app.api.schemas import (
    SignUpRequest,
    SignInRequest,
    GoogleSignInRequest,
    ProfileUpdate,
    VideoRequest,
    ChannelRequest,
)
from transcript_app.core.youtube_client import YouTubeClient
from transcript_app.db import crud
from transcript_app.db.database import get_db, DBSession
from transcript_app.db.models import MEMORY_TYPES
from transcript_app.utils.error_handling import YouTubeFetchError
from transcript_app.utils.helpers import extract_video_id
from transcript_app.utils.logger import logging

router = APIRouter(prefix="/api", tags=["transcripts"])

_youtube_client = None


def get_youtube_client() -> YouTubeClient:
    """Shared YouTube client; overridable as a FastAPI dependency."""
    global _youtube_client
    if _youtube_client is None:
        _youtube_client = YouTubeClient()
    return _youtube_client


def require_user_id(request: Request) -> int:
    """Dependency rejecting requests without a signed-in session."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def _check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def _video_id_or_400(url: str) -> str:
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")
    video_id = extract_video_id(url)
    if not video_id:
        raise HTTPException(status_code=400, detail="Invalid YouTube URL")
    return video_id


# ============ AUTH ROUTES ============

@router.post("/auth/signup")
def sign_up(payload: SignUpRequest, request: Request, db: DBSession = Depends(get_db)):
    """Create an email/password account and sign it in."""
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="User already exists")

    user = crud.create_user(db, payload.email, _hash_password(payload.password), name=payload.name or "")
    request.session["user_id"] = user.id
    logging.info(f"Created account {user.id}")
    return {"user": user.public_dict()}


@router.post("/auth/signin")
def sign_in(payload: SignInRequest, request: Request, db: DBSession = Depends(get_db)):
    """Sign in with email and password."""
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = crud.get_user_by_email(db, payload.email)
    if not user or not user.password or not _check_password(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session["user_id"] = user.id
    return {"user": user.public_dict()}


@router.post("/auth/google")
def google_sign_in(payload: GoogleSignInRequest, request: Request, db: DBSession = Depends(get_db)):
    """Sign in with a Google identity, creating or linking the account by email."""
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")

    user = crud.get_user_by_email(db, payload.email)
    if not user:
        user = crud.create_user(
            db,
            payload.email,
            name=payload.name or "",
            photo_url=payload.photoURL or "",
            google_id=payload.googleId,
        )
    elif payload.googleId and not user.google_id:
        user = crud.update_user(
            db,
            user,
            google_id=payload.googleId,
            name=payload.name or user.name,
            photo_url=payload.photoURL or user.photo_url,
        )

    request.session["user_id"] = user.id
    return {"user": user.public_dict()}


@router.get("/auth/me")
def get_current_user(request: Request, db: DBSession = Depends(get_db)):
    """Get the signed-in user."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = crud.get_user(db, user_id)
    if not user:
        request.session.clear()
        raise HTTPException(status_code=404, detail="User not found")

    return {"user": user.public_dict()}


@router.post("/auth/signout")
def sign_out(request: Request):
    """End the session."""
    request.session.clear()
    return {"message": "Signed out successfully"}


# ============ USER PROFILE ROUTES ============

@router.get("/user/profile")
def get_profile(user_id: int = Depends(require_user_id), db: DBSession = Depends(get_db)):
    user = crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user.to_dict()


@router.put("/user/profile")
def update_profile(payload: ProfileUpdate, user_id: int = Depends(require_user_id),
                   db: DBSession = Depends(get_db)):
    user = crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    updates = {}
    if payload.name is not None:
        updates["name"] = payload.name
    if payload.photoURL is not None:
        updates["photo_url"] = payload.photoURL
    user = crud.update_user(db, user, **updates)
    return user.to_dict()


# ============ VIDEO ROUTES ============

@router.post("/video-info")
def video_info(payload: VideoRequest, youtube: YouTubeClient = Depends(get_youtube_client)):
    """Get metadata for a video URL."""
    video_id = _video_id_or_400(payload.url)
    try:
        return youtube.get_video_info(video_id)
    except YouTubeFetchError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/transcript")
def transcript(payload: VideoRequest, youtube: YouTubeClient = Depends(get_youtube_client)):
    """Fetch the transcript for a video URL."""
    video_id = _video_id_or_400(payload.url)
    try:
        segments, is_short = youtube.get_transcript(video_id, payload.url)
    except YouTubeFetchError as e:
        content = {"error": str(e)}
        if e.is_short is not None:
            content["isShort"] = e.is_short
        return JSONResponse(status_code=e.status_code, content=content)

    return {"transcript": segments, "isShort": is_short}


@router.post("/channel-videos")
def channel_videos(payload: ChannelRequest, youtube: YouTubeClient = Depends(get_youtube_client)):
    """List a channel's recent videos."""
    if not payload.channelUrl:
        raise HTTPException(status_code=400, detail="Channel URL is required")
    try:
        return youtube.get_channel_videos(payload.channelUrl, payload.limit)
    except YouTubeFetchError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


# ============ TRANSCRIPT ROUTES ============

@router.post("/transcripts")
def save_transcript(data: Dict[str, Any] = Body(...), user_id: int = Depends(require_user_id),
                    db: DBSession = Depends(get_db)):
    if not data.get("videoId") or not data.get("title"):
        raise HTTPException(status_code=400, detail="videoId and title are required")
    return crud.create_transcript(db, user_id, data).to_dict()


@router.get("/transcripts")
def list_transcripts(user_id: int = Depends(require_user_id), db: DBSession = Depends(get_db)):
    return [t.to_dict() for t in crud.get_transcripts(db, user_id)]


@router.delete("/transcripts/{transcript_id}")
def delete_transcript(transcript_id: int, user_id: int = Depends(require_user_id),
                      db: DBSession = Depends(get_db)):
    if not crud.delete_transcript(db, user_id, transcript_id):
        raise HTTPException(status_code=404, detail="Transcript not found")
    return {"message": "Transcript deleted"}


@router.delete("/transcripts")
def delete_all_transcripts(user_id: int = Depends(require_user_id), db: DBSession = Depends(get_db)):
    count = crud.delete_all_transcripts(db, user_id)
    return {"message": f"Deleted {count} transcripts"}


# ============ AI SETTINGS ROUTES ============

@router.get("/ai-settings")
def get_ai_settings(user_id: int = Depends(require_user_id), db: DBSession = Depends(get_db)):
    return crud.get_or_create_ai_settings(db, user_id).to_dict()


@router.put("/ai-settings")
def update_ai_settings(data: Dict[str, Any] = Body(...), user_id: int = Depends(require_user_id),
                       db: DBSession = Depends(get_db)):
    return crud.update_ai_settings(db, user_id, data).to_dict()


# ============ MEMORY ROUTES ============

@router.post("/memories")
def save_memory(data: Dict[str, Any] = Body(...), user_id: int = Depends(require_user_id),
                db: DBSession = Depends(get_db)):
    if not data.get("type"):
        raise HTTPException(status_code=400, detail="Type is required")
    if data["type"] not in MEMORY_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid memory type: {data['type']}")
    if not data.get("title"):
        raise HTTPException(status_code=400, detail="Title is required")
    return crud.create_memory(db, user_id, data).to_dict()


@router.get("/memories")
def list_memories(user_id: int = Depends(require_user_id), db: DBSession = Depends(get_db)):
    return [m.to_dict() for m in crud.get_memories(db, user_id)]


@router.delete("/memories/{memory_id}")
def delete_memory(memory_id: int, user_id: int = Depends(require_user_id),
                  db: DBSession = Depends(get_db)):
    if not crud.delete_memory(db, user_id, memory_id):
        raise HTTPException(status_code=404, detail="Memory not found")
    return {"message": "Memory deleted"}
