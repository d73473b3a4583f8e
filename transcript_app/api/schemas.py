from pydantic import BaseModel, Field
from typing import Optional


class SignUpRequest(BaseModel):
    """Model for email/password sign up."""
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = ""


class SignInRequest(BaseModel):
    """Model for email/password sign in."""
    email: Optional[str] = None
    password: Optional[str] = None


class GoogleSignInRequest(BaseModel):
    """Model for a Google identity verified by the client's OAuth flow."""
    email: Optional[str] = None
    name: Optional[str] = None
    photoURL: Optional[str] = None
    googleId: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Model for profile updates."""
    name: Optional[str] = None
    photoURL: Optional[str] = None


class VideoRequest(BaseModel):
    """Model for video info and transcript requests."""
    url: Optional[str] = None


class ChannelRequest(BaseModel):
    """Model for channel listing requests."""
    channelUrl: Optional[str] = None
    limit: int = Field(default=10, ge=1, le=50)
