from tutorbot.models.instruction import SystemInstruction
from tutorbot.models.transcript import ChatTranscript, Part, Turn
from tutorbot.models.user import User

__all__ = [
    "ChatTranscript",
    "Part",
    "SystemInstruction",
    "Turn",
    "User",
]
