"""Shared FastAPI dependencies that bind stores to the request's DB session."""

from fastapi import Depends
from sqlmodel import Session

from tutorbot.core.config import Settings, get_settings
from tutorbot.core.database import get_session
from tutorbot.services.instructions import InstructionStore
from tutorbot.services.transcript_store import TranscriptStore


def get_transcript_store(
    session: Session = Depends(get_session), config: Settings = Depends(get_settings)
) -> TranscriptStore:
    return TranscriptStore(session, bot_id=config.bot_id)


def get_instruction_store(
    session: Session = Depends(get_session), config: Settings = Depends(get_settings)
) -> InstructionStore:
    return InstructionStore(session, config)
