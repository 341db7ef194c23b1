"""Chat turn endpoint: relays a prompt plus client history to the LLM."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from tutorbot.api.deps import get_instruction_store
from tutorbot.core.config import Settings, get_settings
from tutorbot.core.ids import new_session_id, new_user_id
from tutorbot.models.transcript import Turn
from tutorbot.services.conversation import build_history, extend_history
from tutorbot.services.instructions import InstructionStore
from tutorbot.services.llm import get_llm_provider
from tutorbot.services.llm.base import BaseLLMProvider

router = APIRouter()
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    prompt: str | None = None
    historico: list[Turn] | None = None
    sessionId: str | None = None
    userId: str | None = None


@router.post("/generate")
async def generate(
    body: GenerateRequest,
    instructions: InstructionStore = Depends(get_instruction_store),
    provider: BaseLLMProvider = Depends(get_llm_provider),
    config: Settings = Depends(get_settings),
):
    if not body.prompt or not body.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")

    session_id = body.sessionId or new_session_id()
    user_id = body.userId or new_user_id()
    client_history = body.historico or []

    active = instructions.get_active()
    provider_history = build_history(active.instruction, config.instruction_ack, client_history)

    try:
        response = await provider.send(provider_history, body.prompt)
    except Exception:
        logger.exception(f"LLM call failed for session {session_id} (user {user_id})")
        raise HTTPException(status_code=500, detail="An error occurred while processing your request")

    history = extend_history(client_history, body.prompt, response)
    return {
        "response": response,
        "historico": [turn.model_dump(mode="json") for turn in history],
        "sessionId": session_id,
        "userId": user_id,
    }
