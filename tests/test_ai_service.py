"""
Tests for the AI tools, with the chat model replaced by a runnable stub.
"""

import pytest
from unittest.mock import patch
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_core.runnables import RunnableLambda

from transcript_app.config import config
from transcript_app.core import ai_service
from transcript_app.core.ai_service import (
    AIService,
    parse_cards,
    resolve_api_key,
    verify_access_code,
)
from transcript_app.utils.error_handling import AIServiceError


class StubModel:
    """Records the prompts it receives and answers with a fixed reply."""

    def __init__(self, reply="ok"):
        self.reply = reply
        self.prompts = []

    def __call__(self, prompt_value):
        self.prompts.append(prompt_value.to_messages())
        if isinstance(self.reply, Exception):
            raise self.reply
        return AIMessage(content=self.reply)


@pytest.fixture
def stub_model():
    model = StubModel()
    runnable = RunnableLambda(lambda prompt_value: model(prompt_value))
    with patch.object(ai_service, "init_chat_model", return_value=runnable) as init:
        model.init = init
        yield model


def test_unsupported_provider():
    with pytest.raises(ValueError):
        AIService("openai", "key")


def test_model_defaults_per_provider(stub_model, sample_transcript):
    service = AIService("gemini", "gemini-key")
    service.summarize(sample_transcript)

    kwargs = stub_model.init.call_args.kwargs
    assert kwargs["model"] == config.DEFAULT_GEMINI_MODEL
    assert kwargs["model_provider"] == "google_genai"
    assert kwargs["api_key"] == "gemini-key"


def test_summarize_includes_transcript(stub_model, sample_transcript):
    stub_model.reply = "A short summary."

    result = AIService("groq", "key").summarize(sample_transcript, length="short")

    assert result == "A short summary."
    prompt = stub_model.prompts[0][0].content
    assert "Hello and welcome. Today we talk about caching." in prompt


def test_translate_passes_language(stub_model, sample_transcript):
    AIService("groq", "key").translate(sample_transcript, "Spanish")

    assert "Spanish" in stub_model.prompts[0][0].content


def test_chat_history(stub_model, sample_transcript):
    stub_model.reply = "It is about caching."
    history = [
        {"role": "user", "content": "Is {this} a template?"},
        {"role": "assistant", "content": "No."},
    ]

    answer = AIService("groq", "key").chat(sample_transcript, "What is it about?", history)

    assert answer == "It is about caching."
    messages = stub_model.prompts[0]
    assert isinstance(messages[0], SystemMessage)
    assert "Thanks for watching!" in messages[0].content
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content == "Is {this} a template?"
    assert isinstance(messages[2], AIMessage)
    assert messages[3].content == "What is it about?"


def test_flashcards_are_parsed(stub_model, sample_transcript):
    stub_model.reply = 'Here you go:\n[{"question": "What?", "answer": "Caching."}]'

    cards = AIService("groq", "key").generate_flashcards(sample_transcript, count=1)

    assert cards == [{"question": "What?", "answer": "Caching."}]


def test_model_errors_are_wrapped(stub_model, sample_transcript):
    stub_model.reply = RuntimeError("rate limited")

    with pytest.raises(AIServiceError, match="Failed to get response from Groq AI"):
        AIService("groq", "key").key_points(sample_transcript)


@pytest.mark.parametrize("response,expected", [
    ('[{"question": "Q", "answer": "A"}]', [{"question": "Q", "answer": "A"}]),
    ('```json\n[{"question": "Q", "answer": "A"}]\n```', [{"question": "Q", "answer": "A"}]),
    ("I cannot do that.", []),
    ('{"question": "Q"}', []),
    ('[1, {"question": "Q", "answer": "A"}]', [{"question": "Q", "answer": "A"}]),
])
def test_parse_cards(response, expected):
    assert parse_cards(response) == expected


def test_resolve_api_key_prefers_own_key(monkeypatch):
    monkeypatch.setattr(config, "GROQ_API_KEY", "shared")

    assert resolve_api_key("groq", {"groqApiKey": "mine", "groqUnlocked": True}) == "mine"


def test_resolve_api_key_uses_shared_key_when_unlocked(monkeypatch):
    monkeypatch.setattr(config, "GEMINI_API_KEY", "shared")

    assert resolve_api_key("gemini", {"geminiUnlocked": True}) == "shared"


def test_resolve_api_key_locked(monkeypatch):
    monkeypatch.setattr(config, "GROQ_API_KEY", "shared")

    with pytest.raises(AIServiceError):
        resolve_api_key("groq", {"groqUnlocked": False})


def test_verify_access_code(monkeypatch):
    monkeypatch.setattr(config, "ACCESS_CODES", {"groq": ("alpha", "beta"), "gemini": (None, None)})

    assert verify_access_code("groq", "alpha", "beta") is True
    assert verify_access_code("groq", "alpha", "wrong") is False
    assert verify_access_code("gemini", "", "") is False
    assert verify_access_code("unknown", "a", "b") is False


def test_verify_access_code_non_ascii(monkeypatch):
    monkeypatch.setattr(config, "ACCESS_CODES", {"groq": ("abc", "café")})

    assert verify_access_code("groq", "é", "café") is False
    assert verify_access_code("groq", "abc", "café") is True
