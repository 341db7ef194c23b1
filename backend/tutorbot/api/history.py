"""REST API for saved chat transcripts: save, list, delete, retitle."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from sqlmodel import Session

from tutorbot.api.deps import get_transcript_store
from tutorbot.core.config import Settings, get_settings
from tutorbot.core.database import get_session
from tutorbot.models.transcript import Turn
from tutorbot.services.llm import get_llm_provider
from tutorbot.services.llm.base import BaseLLMProvider
from tutorbot.services.titles import generate_title
from tutorbot.services.transcript_store import InvalidTitleError, MalformedIdError, TranscriptStore
from tutorbot.services.users import ensure_user

router = APIRouter()
logger = logging.getLogger(__name__)

_turns = TypeAdapter(list[Turn])


class SaveHistoryRequest(BaseModel):
    # Unknown keys are kept on the transcript's extension map
    model_config = ConfigDict(extra="allow")

    sessionId: str | None = None
    userId: str | None = None
    messages: Any = None
    titulo: str | None = None


class RenameRequest(BaseModel):
    titulo: str | None = None


@router.post("/salvar-historico")
async def save_history(
    body: SaveHistoryRequest,
    store: TranscriptStore = Depends(get_transcript_store),
    session: Session = Depends(get_session),
):
    if not body.sessionId or not body.userId or body.messages is None:
        raise HTTPException(status_code=400, detail="sessionId, userId and messages are required")
    if not isinstance(body.messages, list):
        raise HTTPException(status_code=400, detail="messages must be a list")

    try:
        turns = _turns.validate_python(body.messages)
    except ValidationError as e:
        logger.debug(f"Rejected history for session {body.sessionId}: {e}")
        raise HTTPException(status_code=400, detail="messages contains an invalid turn")

    transcript = store.upsert_by_session_id(
        body.sessionId,
        body.userId,
        turns,
        title=body.titulo,
        extra=body.model_extra,
    )
    ensure_user(session, body.userId)
    logger.info(f"Saved session {body.sessionId} for user {body.userId} ({len(turns)} messages)")
    return {"success": True, "message": "History saved", "id": transcript.id}


@router.get("/historicos")
async def list_histories(
    userId: str | None = None,
    store: TranscriptStore = Depends(get_transcript_store),
    config: Settings = Depends(get_settings),
):
    if not userId:
        raise HTTPException(status_code=400, detail="userId is required")
    return [t.to_api() for t in store.list_by_user(userId, limit=config.history_limit)]


@router.delete("/historicos/{transcript_id}")
async def delete_history(transcript_id: str, store: TranscriptStore = Depends(get_transcript_store)):
    try:
        deleted = store.delete_by_id(transcript_id)
    except MalformedIdError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not deleted:
        logger.debug(f"Delete: transcript {transcript_id} not found")
        raise HTTPException(status_code=404, detail="Transcript not found")

    logger.info(f"Deleted transcript {transcript_id}")
    return {"success": True, "message": "Transcript deleted"}


@router.post("/historicos/{transcript_id}/gerar-titulo")
async def suggest_title(
    transcript_id: str,
    store: TranscriptStore = Depends(get_transcript_store),
    provider: BaseLLMProvider = Depends(get_llm_provider),
):
    try:
        title = await generate_title(store, provider, transcript_id)
    except MalformedIdError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Title generation failed for transcript {transcript_id}")
        raise HTTPException(status_code=500, detail="Could not generate a title")

    if title is None:
        raise HTTPException(status_code=404, detail="Transcript not found")
    return {"titulo": title}


@router.put("/historicos/{transcript_id}")
async def rename_history(
    transcript_id: str,
    body: RenameRequest,
    store: TranscriptStore = Depends(get_transcript_store),
):
    try:
        transcript = store.rename_title(transcript_id, body.titulo or "")
    except (MalformedIdError, InvalidTitleError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    if transcript is None:
        raise HTTPException(status_code=404, detail="Transcript not found")
    return transcript.to_api()
