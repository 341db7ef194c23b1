"""Tests for the Gemini provider against a stubbed google-genai client."""

import asyncio
from types import SimpleNamespace
from unittest.mock import patch

from tutorbot.services.llm.gemini import GeminiProvider

DELAY = 0.5


class SlowChat:
    def __init__(self):
        self.prompts = []

    async def send_message(self, prompt):
        self.prompts.append(prompt)
        await asyncio.sleep(DELAY)
        return SimpleNamespace(text="done", usage_metadata=None)


class SlowClient:
    """Stand-in for genai.Client exposing only the async surface."""

    def __init__(self, api_key=None):
        self.api_key = api_key
        self.chat = SlowChat()
        self.chats_created = []
        self.aio = SimpleNamespace(
            chats=SimpleNamespace(create=self._create_chat),
            models=SimpleNamespace(generate_content=self._generate_content),
        )

    def _create_chat(self, model, history):
        self.chats_created.append((model, history))
        return self.chat

    async def _generate_content(self, model, contents):
        await asyncio.sleep(DELAY)
        return SimpleNamespace(text="Plant Biology")


async def _with_ticker(coro):
    """Await coro while a 20 ms ticker runs alongside; return (result, ticks)."""
    ticks = 0

    async def ticker():
        nonlocal ticks
        while True:
            await asyncio.sleep(0.02)
            ticks += 1

    task = asyncio.create_task(ticker())
    try:
        result = await coro
    finally:
        task.cancel()
    return result, ticks


def test_send_does_not_block_event_loop():
    with patch("tutorbot.services.llm.gemini.genai.Client", SlowClient):
        provider = GeminiProvider(api_key="k", model="m")
        history = [{"role": "user", "parts": [{"text": "Be nice."}]}, {"role": "model", "parts": [{"text": "OK."}]}]

        result, ticks = asyncio.run(_with_ticker(provider.send(history, "hello")))

    assert result == "done"
    assert ticks >= 5
    model, contents = provider.client.chats_created[0]
    assert model == "m"
    assert [c.role for c in contents] == ["user", "model"]
    assert contents[0].parts[0].text == "Be nice."
    assert provider.client.chat.prompts == ["hello"]


def test_summarize_does_not_block_event_loop():
    with patch("tutorbot.services.llm.gemini.genai.Client", SlowClient):
        provider = GeminiProvider(api_key="k")
        result, ticks = asyncio.run(_with_ticker(provider.summarize("User: hi")))

    assert result == "Plant Biology"
    assert ticks >= 5
