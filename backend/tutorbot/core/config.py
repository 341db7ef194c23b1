from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_INSTRUCTION = (
    "Você é um assistente educacional inteligente do IFPR. Responda de forma clara, "
    "educativa e sempre incentive o aprendizado. Mantenha um tom amigável e profissional."
)


class Settings(BaseSettings):
    app_name: str = "Tutorbot"
    debug: bool = False

    # Storage
    database_url: str = f"sqlite:///{Path(__file__).resolve().parent.parent.parent / 'tutorbot.db'}"

    # LLM
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Admin
    admin_password: str = ""

    # Bot
    bot_id: str = "assistente-gemini-ifpr"
    default_instruction: str = DEFAULT_INSTRUCTION
    instruction_ack: str = "Entendido. Seguirei essas instruções em todas as respostas."

    # Listings
    history_limit: int = 20
    recent_limit: int = 5
    activity_days: int = 7

    # Server
    cors_origins: list[str] = ["*"]

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_prefix": "TUTORBOT_",
        "extra": "ignore",
        "frozen": True,
    }

    def missing_startup_values(self) -> list[str]:
        """Names of settings the server refuses to start without."""
        missing = []
        if not self.gemini_api_key:
            missing.append("TUTORBOT_GEMINI_API_KEY")
        if not self.admin_password:
            missing.append("TUTORBOT_ADMIN_PASSWORD")
        return missing


settings = Settings()


def get_settings() -> Settings:
    return settings
