"""
Tests for the FastAPI backend.
"""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from transcript_app.api.app import app
from transcript_app.api.routes import get_youtube_client
from transcript_app.core.youtube_client import YouTubeClient
from transcript_app.db import models  # noqa: F401  registers the tables
from transcript_app.db.database import Base, get_db
from transcript_app.frontend.api_client import RemoteAPIClient
from transcript_app.utils.error_handling import ApiError, YouTubeFetchError


@pytest.fixture
def youtube():
    return MagicMock(spec=YouTubeClient)


@pytest.fixture
def api(tmp_path, youtube):
    """A TestClient on a fresh database with YouTube access mocked."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'backend.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_youtube_client] = lambda: youtube
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def signed_in(api):
    response = api.post("/api/auth/signup", json={
        "email": "User@Example.com",
        "password": "secret123",
        "name": "Test User",
    })
    assert response.status_code == 200
    return api


def test_root(api):
    response = api.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "YouTube Transcript App"


def test_signup_returns_user_and_session(api):
    response = api.post("/api/auth/signup", json={"email": "User@Example.com", "password": "pw", "name": "A"})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == "user@example.com"
    assert user["name"] == "A"
    assert "password" not in user

    me = api.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user["id"]


def test_signup_requires_fields(api):
    response = api.post("/api/auth/signup", json={"email": "a@example.com"})

    assert response.status_code == 400
    assert response.json() == {"error": "Email and password are required"}


def test_signup_rejects_existing_user(signed_in):
    response = signed_in.post("/api/auth/signup", json={"email": "user@example.com", "password": "x"})

    assert response.status_code == 400
    assert response.json()["error"] == "User already exists"


def test_signin(signed_in):
    signed_in.post("/api/auth/signout")

    wrong = signed_in.post("/api/auth/signin", json={"email": "user@example.com", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json()["error"] == "Invalid email or password"

    right = signed_in.post("/api/auth/signin", json={"email": "user@example.com", "password": "secret123"})
    assert right.status_code == 200
    assert signed_in.get("/api/auth/me").status_code == 200


def test_signout_ends_session(signed_in):
    response = signed_in.post("/api/auth/signout")

    assert response.json() == {"message": "Signed out successfully"}
    me = signed_in.get("/api/auth/me")
    assert me.status_code == 401
    assert me.json()["error"] == "Not authenticated"


def test_google_sign_in_links_existing_account(signed_in):
    response = signed_in.post("/api/auth/google", json={
        "email": "user@example.com",
        "name": "Google Name",
        "photoURL": "https://example.com/me.png",
        "googleId": "g-123",
    })

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Google Name"
    assert user["photoURL"] == "https://example.com/me.png"

    profile = signed_in.get("/api/user/profile").json()
    assert profile["googleId"] == "g-123"


def test_google_sign_in_creates_account(api):
    response = api.post("/api/auth/google", json={"email": "new@example.com", "googleId": "g-1"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "new@example.com"


def test_google_sign_in_requires_email(api):
    response = api.post("/api/auth/google", json={"googleId": "g-1"})

    assert response.status_code == 400
    assert response.json()["error"] == "Email is required"


def test_profile_requires_auth(api):
    response = api.get("/api/user/profile")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_update_profile(signed_in):
    response = signed_in.put("/api/user/profile", json={"name": "Renamed", "photoURL": "https://x/p.png"})

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert signed_in.get("/api/user/profile").json()["photoURL"] == "https://x/p.png"


def test_transcript_crud(signed_in, sample_transcript):
    first = signed_in.post("/api/transcripts", json={
        "videoId": "abc12345678", "title": "First", "transcript": sample_transcript,
    }).json()
    second = signed_in.post("/api/transcripts", json={
        "videoId": "xyz98765432", "title": "Second", "author": "Someone",
    }).json()

    listed = signed_in.get("/api/transcripts").json()
    assert [t["title"] for t in listed] == ["Second", "First"]
    assert listed[1]["transcript"] == sample_transcript

    assert signed_in.delete(f"/api/transcripts/{first['id']}").json() == {"message": "Transcript deleted"}
    assert signed_in.delete(f"/api/transcripts/{first['id']}").status_code == 404

    assert signed_in.delete("/api/transcripts").json() == {"message": "Deleted 1 transcripts"}
    assert signed_in.get("/api/transcripts").json() == []
    assert second["author"] == "Someone"


def test_transcripts_are_private(signed_in, api):
    saved = signed_in.post("/api/transcripts", json={"videoId": "abc12345678", "title": "Mine"}).json()
    signed_in.post("/api/auth/signout")
    api.post("/api/auth/signup", json={"email": "other@example.com", "password": "pw"})

    assert api.get("/api/transcripts").json() == []
    assert api.delete(f"/api/transcripts/{saved['id']}").status_code == 404


def test_ai_settings_defaults_and_update(signed_in):
    settings = signed_in.get("/api/ai-settings").json()
    assert settings["groqUnlocked"] is False
    assert settings["geminiUnlocked"] is False

    updated = signed_in.put("/api/ai-settings", json={"groqUnlocked": True, "geminiApiKey": "key"}).json()
    assert updated["groqUnlocked"] is True
    assert updated["geminiApiKey"] == "key"
    assert signed_in.get("/api/ai-settings").json()["groqUnlocked"] is True


def test_memories(signed_in):
    missing_type = signed_in.post("/api/memories", json={"title": "No type"})
    assert missing_type.status_code == 400
    assert missing_type.json()["error"] == "Type is required"

    missing_title = signed_in.post("/api/memories", json={"type": "summary"})
    assert missing_title.json()["error"] == "Title is required"

    bad_type = signed_in.post("/api/memories", json={"type": "poem", "title": "x"})
    assert bad_type.status_code == 400

    memory = signed_in.post("/api/memories", json={
        "type": "flashcards",
        "title": "Flashcards - Test",
        "cards": [{"question": "Q?", "answer": "A."}],
        "metadata": {"provider": "groq"},
    }).json()
    assert memory["cards"] == [{"question": "Q?", "answer": "A."}]
    assert memory["metadata"] == {"provider": "groq"}

    assert [m["id"] for m in signed_in.get("/api/memories").json()] == [memory["id"]]
    assert signed_in.delete(f"/api/memories/{memory['id']}").json() == {"message": "Memory deleted"}
    assert signed_in.delete(f"/api/memories/{memory['id']}").status_code == 404


def test_video_info(api, youtube, sample_video_info):
    youtube.get_video_info.return_value = sample_video_info

    response = api.post("/api/video-info", json={"url": "https://youtu.be/abc12345678"})

    assert response.status_code == 200
    assert response.json() == sample_video_info
    youtube.get_video_info.assert_called_once_with("abc12345678")


@pytest.mark.parametrize("body,message", [
    ({}, "URL is required"),
    ({"url": "https://example.com/video"}, "Invalid YouTube URL"),
])
def test_video_info_validation(api, body, message):
    response = api.post("/api/video-info", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == message


def test_video_info_failure(api, youtube):
    youtube.get_video_info.side_effect = YouTubeFetchError("Failed to fetch video information")

    response = api.post("/api/video-info", json={"url": "https://youtu.be/abc12345678"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch video information"


def test_transcript_route(api, youtube, sample_transcript):
    youtube.get_transcript.return_value = (sample_transcript, False)

    response = api.post("/api/transcript", json={"url": "https://www.youtube.com/watch?v=abc12345678"})

    assert response.json() == {"transcript": sample_transcript, "isShort": False}


def test_transcript_route_short_without_captions(api, youtube):
    youtube.get_transcript.side_effect = YouTubeFetchError(
        "This Short doesn't have a transcript.", status_code=404, is_short=True
    )

    response = api.post("/api/transcript", json={"url": "https://www.youtube.com/shorts/abc12345678"})

    assert response.status_code == 404
    assert response.json() == {"error": "This Short doesn't have a transcript.", "isShort": True}


def test_channel_videos(api, youtube):
    youtube.get_channel_videos.return_value = {"channelName": "Test", "videos": []}

    response = api.post("/api/channel-videos", json={"channelUrl": "https://www.youtube.com/@test", "limit": 3})

    assert response.json() == {"channelName": "Test", "videos": []}
    youtube.get_channel_videos.assert_called_once_with("https://www.youtube.com/@test", 3)


def test_channel_videos_validation(api, youtube):
    youtube.get_channel_videos.side_effect = YouTubeFetchError("Invalid channel URL format", status_code=400)

    assert api.post("/api/channel-videos", json={}).json()["error"] == "Channel URL is required"
    response = api.post("/api/channel-videos", json={"channelUrl": "https://www.youtube.com/user/x"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid channel URL format"


class ASGISession:
    """Lets RemoteAPIClient talk to the app through the TestClient."""

    def __init__(self, test_client: TestClient):
        self.test_client = test_client

    def request(self, method, url, **kwargs):
        response = self.test_client.request(method, url, **kwargs)
        response.ok = response.status_code < 400
        return response


def test_client_against_backend(api, local_cache, sample_transcript):
    """The API client keeps its session cookie and caches list reads."""
    session = ASGISession(api)
    client = RemoteAPIClient("http://testserver", local_cache=local_cache, session=session)

    with pytest.raises(ApiError, match="Unauthorized"):
        client.get_transcripts()

    client.sign_up("client@example.com", "pw", "Client")
    assert client.get_current_user()["user"]["email"] == "client@example.com"

    assert client.get_transcripts() == []
    client.save_transcript({"videoId": "abc12345678", "title": "Saved", "transcript": sample_transcript})
    saved = client.get_transcripts()
    assert [t["title"] for t in saved] == ["Saved"]

    # Served from cache: a change made behind the client's back is not seen
    api.delete("/api/transcripts")
    assert client.get_transcripts() == saved

    client.update_ai_settings({"groqUnlocked": True})
    assert client.get_ai_settings()["groqUnlocked"] is True
