"""Transcript store: chat sessions keyed by session id.

Saves replace the whole message list (last write wins). Each client always
saves its full accumulated history, so there is nothing to merge.
"""

import logging
from collections import Counter
from datetime import datetime, time, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tutorbot.models.transcript import DEFAULT_TITLE, ChatTranscript, Turn, utcnow

logger = logging.getLogger(__name__)


class TranscriptStoreError(Exception):
    pass


class MalformedIdError(TranscriptStoreError):
    pass


class InvalidTitleError(TranscriptStoreError):
    pass


def parse_transcript_id(raw: str | int) -> int:
    """Turn a path segment into a transcript id. Raises MalformedIdError on anything but a positive integer."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and raw.isascii() and raw.isdigit():
        value = int(raw)
    else:
        raise MalformedIdError(f"Invalid transcript id: {raw!r}")
    if value <= 0:
        raise MalformedIdError(f"Invalid transcript id: {raw!r}")
    return value


class TranscriptStore:
    def __init__(self, session: Session, bot_id: str, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.bot_id = bot_id
        self.clock = clock

    def get_by_session_id(self, session_id: str) -> ChatTranscript | None:
        return self.session.exec(
            select(ChatTranscript).where(ChatTranscript.session_id == session_id)
        ).first()

    def upsert_by_session_id(
        self,
        session_id: str,
        user_id: str,
        messages: list[Turn],
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> ChatTranscript:
        dumped = [m.model_dump(mode="json") for m in messages]
        transcript = self.get_by_session_id(session_id)
        if transcript is None:
            transcript = self._insert(session_id, user_id, dumped, title, extra)
            if transcript is not None:
                return transcript
            # Lost a race against a concurrent first save, fall through to update
            transcript = self.get_by_session_id(session_id)
            if transcript is None:
                raise TranscriptStoreError(f"Session {session_id} vanished during save")

        now = self.clock()
        transcript.messages = dumped
        transcript.end_time = now
        transcript.updated_at = now
        if title and title.strip():
            transcript.title = title.strip()
        if extra:
            transcript.extra = {**(transcript.extra or {}), **extra}
        self.session.add(transcript)
        self.session.commit()
        self.session.refresh(transcript)
        logger.debug(f"Updated transcript {transcript.id} for session {session_id} ({len(dumped)} messages)")
        return transcript

    def _insert(
        self,
        session_id: str,
        user_id: str,
        dumped: list[dict],
        title: str | None,
        extra: dict[str, Any] | None,
    ) -> ChatTranscript | None:
        now = self.clock()
        transcript = ChatTranscript(
            session_id=session_id,
            user_id=user_id,
            bot_id=self.bot_id,
            title=title.strip() if title and title.strip() else DEFAULT_TITLE,
            start_time=now,
            end_time=now,
            messages=dumped,
            extra=dict(extra or {}),
            logged_at=now,
            created_at=now,
            updated_at=now,
        )
        self.session.add(transcript)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info(f"Concurrent insert for session {session_id}, retrying as update")
            return None
        self.session.refresh(transcript)
        logger.debug(f"Created transcript {transcript.id} for session {session_id}")
        return transcript

    def list_by_user(self, user_id: str, limit: int = 20) -> list[ChatTranscript]:
        return list(self.session.exec(
            select(ChatTranscript)
            .where(ChatTranscript.user_id == user_id)
            .order_by(ChatTranscript.start_time.desc())  # type: ignore
            .limit(limit)
        ).all())

    def get(self, transcript_id: str | int) -> ChatTranscript | None:
        return self.session.get(ChatTranscript, parse_transcript_id(transcript_id))

    def delete_by_id(self, transcript_id: str | int) -> bool:
        transcript = self.get(transcript_id)
        if transcript is None:
            return False
        self.session.delete(transcript)
        self.session.commit()
        return True

    def rename_title(self, transcript_id: str | int, new_title: str) -> ChatTranscript | None:
        if not new_title or not new_title.strip():
            raise InvalidTitleError("Title must not be empty")
        transcript = self.get(transcript_id)
        if transcript is None:
            return None
        transcript.title = new_title.strip()
        transcript.updated_at = self.clock()
        self.session.add(transcript)
        self.session.commit()
        self.session.refresh(transcript)
        return transcript

    # --- Aggregates ---

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(ChatTranscript)).one()

    def total_messages(self) -> int:
        # JSON arrays are not portable to count in SQL, so sum in Python
        rows = self.session.exec(select(ChatTranscript.messages)).all()
        return sum(len(messages or []) for messages in rows)

    def recent(self, limit: int = 5) -> list[ChatTranscript]:
        return list(self.session.exec(
            select(ChatTranscript)
            .order_by(ChatTranscript.start_time.desc())  # type: ignore
            .limit(limit)
        ).all())

    def activity_by_day(self, days: int = 7) -> list[dict]:
        """Transcripts started per calendar day over the trailing window, oldest day first."""
        today = self.clock().astimezone(timezone.utc).date()
        first_day = today - timedelta(days=days - 1)
        cutoff = datetime.combine(first_day, time.min, tzinfo=timezone.utc)

        start_times = self.session.exec(
            select(ChatTranscript.start_time).where(ChatTranscript.start_time >= cutoff)
        ).all()
        counts = Counter(t.date().isoformat() for t in start_times)
        return [{"_id": day, "count": counts[day]} for day in sorted(counts)]

    def page(self, page: int = 1, limit: int = 20) -> tuple[list[ChatTranscript], int]:
        total = self.count()
        rows = list(self.session.exec(
            select(ChatTranscript)
            .order_by(ChatTranscript.start_time.desc())  # type: ignore
            .offset((page - 1) * limit)
            .limit(limit)
        ).all())
        return rows, total
