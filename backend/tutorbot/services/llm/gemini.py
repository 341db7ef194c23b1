"""Google Gemini LLM provider."""

import logging

from google import genai
from google.genai import types

from tutorbot.services.llm.base import BaseLLMProvider

logger = logging.getLogger(__name__)


class GeminiProvider(BaseLLMProvider):
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash"):
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def send(self, history: list[dict], prompt: str) -> str:
        contents = [types.Content(**m) for m in history]
        logger.info(f"Gemini chat: model={self.model} history={len(contents)} prompt={prompt[:80]!r}")
        # Async client so a slow provider call does not hold up other requests
        chat = self.client.aio.chats.create(model=self.model, history=contents)
        response = await chat.send_message(prompt)

        usage = response.usage_metadata
        if usage:
            logger.debug(
                f"Gemini usage: prompt={usage.prompt_token_count} "
                f"response={usage.candidates_token_count} total={usage.total_token_count}"
            )
        return response.text or ""

    async def summarize(self, text: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=text,
        )
        return response.text or ""
