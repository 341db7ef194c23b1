"""System instruction store: one active instruction per bot.

Updates are two separate commits (deactivate everything, then insert the new
row). A reader landing between them sees no active row and materializes the
default; two writers interleaving can leave two rows active, in which case the
newest one wins on read.
"""

import logging

from sqlmodel import Session, select

from tutorbot.core.config import Settings
from tutorbot.models.instruction import SystemInstruction
from tutorbot.models.transcript import utcnow

logger = logging.getLogger(__name__)


class InstructionStore:
    def __init__(self, session: Session, config: Settings):
        self.session = session
        self.config = config

    def _bot(self, bot_id: str | None) -> str:
        return bot_id or self.config.bot_id

    def _active_rows(self, bot_id: str) -> list[SystemInstruction]:
        return list(self.session.exec(
            select(SystemInstruction)
            .where(SystemInstruction.bot_id == bot_id, SystemInstruction.is_active == True)  # noqa: E712
            .order_by(SystemInstruction.updated_at.desc(), SystemInstruction.id.desc())  # type: ignore
        ).all())

    def get_active(self, bot_id: str | None = None) -> SystemInstruction:
        bot_id = self._bot(bot_id)
        rows = self._active_rows(bot_id)
        if rows:
            if len(rows) > 1:
                logger.warning(f"{len(rows)} active instructions for bot {bot_id}, using newest")
            return rows[0]

        logger.info(f"No active instruction for bot {bot_id}, creating default")
        return self.insert_active(bot_id, self.config.default_instruction, updated_by="system")

    def set_active(self, new_text: str, updated_by: str = "admin", bot_id: str | None = None) -> SystemInstruction:
        if not new_text or not new_text.strip():
            raise ValueError("Instruction text must not be empty")
        bot_id = self._bot(bot_id)
        self.deactivate_all(bot_id)
        instruction = self.insert_active(bot_id, new_text.strip(), updated_by=updated_by)
        logger.info(f"System instruction for bot {bot_id} updated by {updated_by} (id={instruction.id})")
        return instruction

    def deactivate_all(self, bot_id: str) -> int:
        rows = self._active_rows(bot_id)
        now = utcnow()
        for row in rows:
            row.is_active = False
            row.updated_at = now
            self.session.add(row)
        self.session.commit()
        return len(rows)

    def insert_active(self, bot_id: str, text: str, updated_by: str = "admin") -> SystemInstruction:
        instruction = SystemInstruction(
            bot_id=bot_id,
            instruction=text,
            updated_by=updated_by,
            is_active=True,
        )
        self.session.add(instruction)
        self.session.commit()
        self.session.refresh(instruction)
        return instruction

    def history(self, bot_id: str | None = None) -> list[SystemInstruction]:
        return list(self.session.exec(
            select(SystemInstruction)
            .where(SystemInstruction.bot_id == self._bot(bot_id))
            .order_by(SystemInstruction.id.desc())  # type: ignore
        ).all())
