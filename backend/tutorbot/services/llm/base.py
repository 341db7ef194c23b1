"""Abstract LLM provider interface. All providers must implement this."""

from abc import ABC, abstractmethod


class BaseLLMProvider(ABC):
    @abstractmethod
    async def send(self, history: list[dict], prompt: str) -> str:
        """Continue a chat seeded with `history` by sending `prompt`. Returns the reply text.

        History is in Gemini format: [{"role": "user", "parts": [{"text": "..."}]}]
        """
        ...

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """Single-shot generation without history, used for titles and summaries."""
        ...
