"""
Running AI tools on a loaded transcript and saving the results as memories.
"""

from typing import Any, Dict, List, Optional

from transcript_app.core.ai_service import AIService, resolve_api_key, verify_access_code
from transcript_app.frontend.api_client import RemoteAPIClient
from transcript_app.utils.error_handling import AIServiceError
from transcript_app.utils.logger import logging

CARD_TOOLS = ("questions", "flashcards")

TOOL_NAMES = {
    "chat": "Chat",
    "questions": "Practice Questions",
    "flashcards": "Flashcards",
    "summary": "Summary",
    "keypoints": "Key Points",
    "rewrite": "Rewrite",
    "translate": "Translate",
}


class AIToolRunner:
    """Runs AI tools with the provider keys from the user's AI settings."""

    def __init__(self, client: RemoteAPIClient, provider: str = "groq"):
        self.client = client
        self.provider = provider

    def unlock(self, code1: str, code2: str) -> Dict[str, Any]:
        """
        Unlock the shared key of the provider with its pair of access codes.

        Any key the user saved for the provider is dropped, so the shared
        key is used from now on.

        Raises:
            AIServiceError: The codes are wrong
        """
        if not verify_access_code(self.provider, code1, code2):
            raise AIServiceError("Invalid access codes. Please try again.")

        logging.info(f"Unlocked shared {self.provider} key")
        return self.client.update_ai_settings({
            f"{self.provider}Unlocked": True,
            f"{self.provider}ApiKey": None,
        })

    def save_api_key(self, api_key: str) -> Dict[str, Any]:
        """Save the user's own key for the provider."""
        if not api_key or not api_key.strip():
            raise ValueError("Please enter a valid API key")

        return self.client.update_ai_settings({
            f"{self.provider}Unlocked": True,
            f"{self.provider}ApiKey": api_key.strip(),
        })

    def _service(self) -> AIService:
        settings = self.client.get_ai_settings()
        return AIService(self.provider, resolve_api_key(self.provider, settings))

    def run(self, tool: str, transcript: List[Dict[str, Any]], **options: Any) -> Any:
        """
        Run one tool.

        Args:
            tool: One of the memory types other than ``chat``
            transcript: Transcript segments
            options: Tool options (``count``, ``length``, ``style``, ``language``)

        Returns:
            A list of cards for ``questions``/``flashcards``, text otherwise
        """
        service = self._service()
        if tool == "questions":
            return service.generate_questions(transcript, **options)
        if tool == "flashcards":
            return service.generate_flashcards(transcript, **options)
        if tool == "summary":
            return service.summarize(transcript, **options)
        if tool == "keypoints":
            return service.key_points(transcript, **options)
        if tool == "rewrite":
            return service.rewrite(transcript, **options)
        if tool == "translate":
            return service.translate(transcript, **options)
        raise ValueError(f"Unknown AI tool: {tool}")

    def chat(self, transcript: List[Dict[str, Any]], message: str,
             history: Optional[List[Dict[str, str]]] = None) -> str:
        return self._service().chat(transcript, message, history)

    def save(self, tool: str, output: Any, video_title: str,
             transcript_id: Optional[Any] = None, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Save a tool output as a memory.

        ``output`` is the card list for card tools, the message list for
        ``chat`` and the text for the others.
        """
        memory = {
            "type": tool,
            "title": f"{TOOL_NAMES[tool]} - {video_title}",
            "videoTitle": video_title,
            "toolName": TOOL_NAMES[tool],
            "metadata": {"provider": self.provider, "options": options or {}},
        }
        if transcript_id is not None:
            memory["transcriptId"] = transcript_id

        if tool in CARD_TOOLS:
            memory["cards"] = output
        elif tool == "chat":
            memory["messages"] = output
        else:
            memory["result"] = output

        logging.info(f"Saving {tool} output for '{video_title}'")
        return self.client.save_memory(memory)
