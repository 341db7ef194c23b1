"""LLM provider factory."""

from tutorbot.core.config import settings
from tutorbot.services.llm.base import BaseLLMProvider


def get_llm_provider() -> BaseLLMProvider:
    """Factory function that returns the configured LLM provider."""
    from tutorbot.services.llm.gemini import GeminiProvider
    return GeminiProvider(api_key=settings.gemini_api_key, model=settings.gemini_model)
