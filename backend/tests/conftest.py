"""Shared test fixtures for backend tests."""

import os

os.environ.setdefault("TUTORBOT_GEMINI_API_KEY", "test-key")
os.environ.setdefault("TUTORBOT_ADMIN_PASSWORD", "test-admin")
os.environ.setdefault("TUTORBOT_DATABASE_URL", "sqlite://")

from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from tutorbot.core.config import settings  # noqa: E402
from tutorbot.core.database import get_session  # noqa: E402
from tutorbot.services.llm import get_llm_provider  # noqa: E402
from tutorbot.services.llm.base import BaseLLMProvider  # noqa: E402

ADMIN_PASSWORD = settings.admin_password

# In-memory SQLite with StaticPool so all connections (including threads) share one DB
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def get_test_session():
    with Session(test_engine) as session:
        yield session


class FakeLLM(BaseLLMProvider):
    """Records every call and answers with canned text."""

    def __init__(self):
        self.reply = "Fake answer"
        self.title = "Photosynthesis Basics"
        self.error: Exception | None = None
        self.sent: list[tuple[list[dict], str]] = []
        self.summarized: list[str] = []

    async def send(self, history: list[dict], prompt: str) -> str:
        self.sent.append((history, prompt))
        if self.error:
            raise self.error
        return self.reply

    async def summarize(self, text: str) -> str:
        self.summarized.append(text)
        if self.error:
            raise self.error
        return self.title


@pytest.fixture(autouse=True)
def setup_test_db():
    """Create all tables before each test, drop after."""
    import tutorbot.models  # noqa: F401 - register models
    SQLModel.metadata.create_all(test_engine)
    yield
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def db():
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(fake_llm):
    """FastAPI TestClient with the database and LLM swapped out."""
    with patch("tutorbot.core.database.engine", test_engine):
        from tutorbot.main import app

        app.dependency_overrides[get_session] = get_test_session
        app.dependency_overrides[get_llm_provider] = lambda: fake_llm

        with TestClient(app) as c:
            yield c

        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"x-admin-password": ADMIN_PASSWORD}
