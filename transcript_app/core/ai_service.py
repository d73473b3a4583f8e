"""
AI tools over saved transcripts, backed by Groq or Gemini.
"""

import hmac
import json
import re
from typing import Any, Dict, List, Optional

from langchain.chat_models import init_chat_model
from langchain_core.prompts import ChatPromptTemplate

from transcript_app.config import config
from transcript_app.core.prompts import (
    CHAT_SYSTEM_TEMPLATE,
    QUESTIONS_TEMPLATE,
    FLASHCARDS_TEMPLATE,
    SUMMARY_TEMPLATE,
    KEY_POINTS_TEMPLATE,
    REWRITE_TEMPLATE,
    TRANSLATE_TEMPLATE,
)
from transcript_app.utils.error_handling import AIServiceError
from transcript_app.utils.logger import logging

PROVIDERS = {
    "groq": {"model_provider": "groq", "model": config.DEFAULT_GROQ_MODEL},
    "gemini": {"model_provider": "google_genai", "model": config.DEFAULT_GEMINI_MODEL},
}

JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


def verify_access_code(provider: str, code1: str, code2: str) -> bool:
    """Check a pair of access codes for unlocking a provider's shared key."""
    expected = config.ACCESS_CODES.get(provider)
    if not expected or not all(expected):
        return False
    # compare_digest only accepts ASCII str, so compare the UTF-8 bytes
    return (hmac.compare_digest((code1 or "").encode("utf-8"), expected[0].encode("utf-8"))
            and hmac.compare_digest((code2 or "").encode("utf-8"), expected[1].encode("utf-8")))


def resolve_api_key(provider: str, settings: Dict[str, Any]) -> str:
    """
    Pick the API key for a provider from a user's AI settings.

    The user's own key wins; otherwise the shared key is used once the
    provider has been unlocked.
    """
    own_key = settings.get(f"{provider}ApiKey")
    if own_key:
        return own_key

    shared_key = config.GROQ_API_KEY if provider == "groq" else config.GEMINI_API_KEY
    if settings.get(f"{provider}Unlocked") and shared_key:
        return shared_key

    raise AIServiceError(f"No API key available for {provider}. Add a key or unlock the provider in AI settings.")


def transcript_text(transcript: List[Dict[str, Any]]) -> str:
    return " ".join(segment.get("text", "") for segment in transcript)


def extract_json_array(response: str) -> str:
    """Return the JSON array embedded in a model response, or the response unchanged."""
    match = JSON_ARRAY_PATTERN.search(response)
    return match.group(0) if match else response


def parse_cards(response: str) -> List[Dict[str, str]]:
    """Parse question/answer cards out of a model response; [] if it is not valid JSON."""
    try:
        cards = json.loads(extract_json_array(response))
    except ValueError:
        logging.warning("Model response did not contain a valid JSON array")
        return []
    return [card for card in cards if isinstance(card, dict)] if isinstance(cards, list) else []


class AIService:
    """Class to run AI tools over a transcript with one provider."""

    def __init__(self, provider: str, api_key: str, model: Optional[str] = None):
        """
        Initialize the service.

        Args:
            provider: ``groq`` or ``gemini``
            api_key: Provider API key
            model: Model name (defaults to the provider's configured model)
        """
        if provider not in PROVIDERS:
            raise ValueError(f"Unsupported AI provider: {provider}")

        self.provider = provider
        self.api_key = api_key
        self.model = model or PROVIDERS[provider]["model"]

    def _llm(self):
        return init_chat_model(
            model=self.model,
            model_provider=PROVIDERS[self.provider]["model_provider"],
            temperature=config.TEMPERATURE,
            max_tokens=config.MAX_TOKENS,
            api_key=self.api_key,
        )

    def _run(self, prompt: ChatPromptTemplate, variables: Dict[str, Any]) -> str:
        try:
            chain = prompt | self._llm()
            response = chain.invoke(variables)
        except Exception as e:
            logging.error(f"{self.provider} API error: {str(e)}")
            raise AIServiceError(f"Failed to get response from {self.provider.capitalize()} AI") from e
        return response.content or ""

    def _single(self, template: str, transcript: List[Dict[str, Any]], **variables: Any) -> str:
        prompt = ChatPromptTemplate.from_messages([("human", template)])
        return self._run(prompt, {"transcript": transcript_text(transcript), **variables})

    def chat(self, transcript: List[Dict[str, Any]], message: str,
             history: Optional[List[Dict[str, str]]] = None) -> str:
        """
        Answer a question about the transcript.

        Args:
            transcript: Transcript segments
            message: The user's question
            history: Earlier turns as ``{"role": "user"|"assistant", "content": str}``
        """
        messages = [("system", CHAT_SYSTEM_TEMPLATE)]
        for turn in history or []:
            role = "human" if turn.get("role") == "user" else "ai"
            # Braces in earlier turns must not be read as template variables
            content = turn.get("content", "").replace("{", "{{").replace("}", "}}")
            messages.append((role, content))
        messages.append(("human", "{message}"))

        prompt = ChatPromptTemplate.from_messages(messages)
        return self._run(prompt, {"transcript": transcript_text(transcript), "message": message})

    def generate_questions(self, transcript: List[Dict[str, Any]], count: int = 5) -> List[Dict[str, str]]:
        return parse_cards(self._single(QUESTIONS_TEMPLATE, transcript, count=count))

    def generate_flashcards(self, transcript: List[Dict[str, Any]], count: int = 10) -> List[Dict[str, str]]:
        return parse_cards(self._single(FLASHCARDS_TEMPLATE, transcript, count=count))

    def summarize(self, transcript: List[Dict[str, Any]], length: str = "medium") -> str:
        return self._single(SUMMARY_TEMPLATE, transcript, length=length)

    def key_points(self, transcript: List[Dict[str, Any]], count: int = 7) -> str:
        return self._single(KEY_POINTS_TEMPLATE, transcript, count=count)

    def rewrite(self, transcript: List[Dict[str, Any]], style: str = "blog") -> str:
        return self._single(REWRITE_TEMPLATE, transcript, style=style)

    def translate(self, transcript: List[Dict[str, Any]], language: str) -> str:
        return self._single(TRANSLATE_TEMPLATE, transcript, language=language)
