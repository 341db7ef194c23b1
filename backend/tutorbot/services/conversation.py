"""Assembles provider history from the active instruction and the client's transcript.

The instruction travels as a synthetic user/model pair at the head of every
provider call. It never appears in what the client gets back, so saved
transcripts stay readable and old sessions pick up the current instruction.
"""

from tutorbot.models.transcript import Turn


def _gemini_turn(role: str, text: str) -> dict:
    return {"role": role, "parts": [{"text": text}]}


def build_history(instruction: str, acknowledgement: str, client_history: list[Turn]) -> list[dict]:
    """Provider contents: [user:instruction, model:ack] followed by the client turns."""
    history = [
        _gemini_turn("user", instruction),
        _gemini_turn("model", acknowledgement),
    ]
    for turn in client_history:
        history.append({"role": turn.role, "parts": [{"text": p.text} for p in turn.parts]})
    return history


def extend_history(client_history: list[Turn], prompt: str, response: str) -> list[Turn]:
    """Client-visible history after one exchange. Never contains the instruction pair."""
    return [*client_history, Turn.of("user", prompt), Turn.of("model", response)]
