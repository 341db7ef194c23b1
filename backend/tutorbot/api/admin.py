"""Admin dashboard API: usage statistics, system instruction, all transcripts.

Every route here is mounted behind the require_admin dependency.
"""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from tutorbot.api.deps import get_instruction_store, get_transcript_store
from tutorbot.core.config import Settings, get_settings
from tutorbot.services.instructions import InstructionStore
from tutorbot.services.transcript_store import TranscriptStore

router = APIRouter()
logger = logging.getLogger(__name__)


class InstructionUpdate(BaseModel):
    instruction: str | None = None
    updatedBy: str | None = None


@router.get("/stats")
async def stats(
    store: TranscriptStore = Depends(get_transcript_store),
    config: Settings = Depends(get_settings),
):
    recent = store.recent(config.recent_limit)
    return {
        "totalConversas": store.count(),
        "totalMensagens": store.total_messages(),
        "ultimasConversas": [
            {
                "_id": t.id,
                "id": t.id,
                "sessionId": t.session_id,
                "userId": t.user_id,
                "titulo": t.title,
                "startTime": t.start_time.isoformat(),
                "messageCount": len(t.messages or []),
            }
            for t in recent
        ],
        "conversasPorDia": store.activity_by_day(config.activity_days),
    }


@router.get("/system-instruction")
async def get_system_instruction(instructions: InstructionStore = Depends(get_instruction_store)):
    return instructions.get_active().to_api()


@router.post("/system-instruction")
async def update_system_instruction(
    body: InstructionUpdate,
    instructions: InstructionStore = Depends(get_instruction_store),
):
    if not body.instruction or not body.instruction.strip():
        raise HTTPException(status_code=400, detail="instruction is required")

    instruction = instructions.set_active(body.instruction, updated_by=body.updatedBy or "admin")
    return instruction.to_api()


@router.get("/system-instruction/history")
async def system_instruction_history(instructions: InstructionStore = Depends(get_instruction_store)):
    return [row.to_api() for row in instructions.history()]


@router.get("/all-historicos")
async def all_histories(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: TranscriptStore = Depends(get_transcript_store),
):
    rows, total = store.page(page=page, limit=limit)
    return {
        "historicos": [t.to_api() for t in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if total else 0,
        },
    }
