"""Chat transcript models: persisted sessions and the turns they contain."""

from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field as PydanticField
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

DEFAULT_TITLE = "Conversa Sem Título"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Part(BaseModel):
    text: str


class Turn(BaseModel):
    role: Literal["user", "model"]
    parts: list[Part] = PydanticField(min_length=1)
    timestamp: datetime = PydanticField(default_factory=utcnow)

    @property
    def text(self) -> str:
        return " ".join(p.text for p in self.parts)

    @classmethod
    def of(cls, role: str, text: str) -> "Turn":
        return cls(role=role, parts=[Part(text=text)])


class ChatTranscript(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, unique=True)
    user_id: str = Field(index=True)
    bot_id: str
    title: str = Field(default=DEFAULT_TITLE)
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    # Turns as dumped by Turn.model_dump(mode="json")
    messages: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    # Unknown keys sent by clients on save, kept verbatim
    extra: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    logged_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_api(self) -> dict:
        data = dict(self.extra or {})
        data.update({
            "_id": self.id,
            "id": self.id,
            "sessionId": self.session_id,
            "userId": self.user_id,
            "botId": self.bot_id,
            "titulo": self.title,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat() if self.end_time else None,
            "messages": self.messages,
            "loggedAt": self.logged_at.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        })
        return data
