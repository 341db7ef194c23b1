"""System instruction rows. Append-only: each change adds a row and deactivates the rest."""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from tutorbot.models.transcript import utcnow


class SystemInstruction(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    bot_id: str = Field(index=True)  # not unique, old rows are kept
    instruction: str
    updated_by: str = Field(default="admin")
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "botId": self.bot_id,
            "instruction": self.instruction,
            "updatedBy": self.updated_by,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
