"""AI-suggested transcript titles. Suggestions are returned, never saved here."""

import logging

from tutorbot.models.transcript import DEFAULT_TITLE, Turn
from tutorbot.services.llm.base import BaseLLMProvider
from tutorbot.services.transcript_store import TranscriptStore

logger = logging.getLogger(__name__)

MAX_TITLE_WORDS = 5

TITLE_PROMPT = (
    "Com base na conversa abaixo, sugira um título curto e descritivo com no máximo "
    f"{MAX_TITLE_WORDS} palavras. Responda apenas com o título, sem aspas nem pontuação final."
)

_STRIP_CHARS = " \t\r\n\"'`*#.:;!"


def render_transcript(messages: list[Turn]) -> str:
    lines = []
    for turn in messages:
        role = "User" if turn.role == "user" else "Model"
        lines.append(f"{role}: {turn.text}")
    return "\n".join(lines)


def clean_title(raw: str) -> str:
    first_line = next((line for line in raw.splitlines() if line.strip()), "")
    words = first_line.strip(_STRIP_CHARS).split()
    return " ".join(words[:MAX_TITLE_WORDS]).strip(_STRIP_CHARS)


async def generate_title(store: TranscriptStore, provider: BaseLLMProvider, transcript_id: str | int) -> str | None:
    """Suggest a title for a stored transcript. None if the transcript does not exist."""
    transcript = store.get(transcript_id)
    if transcript is None:
        return None

    messages = [Turn.model_validate(m) for m in transcript.messages]
    if not messages:
        return DEFAULT_TITLE

    prompt = f"{TITLE_PROMPT}\n\n{render_transcript(messages)}"
    title = clean_title(await provider.summarize(prompt))
    logger.debug(f"Suggested title for transcript {transcript.id}: {title!r}")
    return title or DEFAULT_TITLE
