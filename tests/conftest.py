import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from agent.llm.base import LLMClient, LLMResponse
from agent.models import load_registry
from api.app import create_app
from config import Settings
from db import ContentRecord, ContentStore

ALICE_KEY = "alice-secret-key"
BOB_KEY = "bob-secret-key"

VALID_CONTENT = {
    "titles": ["🐱 Why Cats Rule the Internet", "Cats: The Untold Story"],
    "description": "Everything you never knew about cats, in ten minutes.",
    "tags": ["#cats", "pets", "#Funny"],
    "thumbnailIdeas": ["CATS 😺", "You won't believe this"],
    "scriptOutline": ["Hook", "History of cats", "Internet fame", "Outro"],
}


class FakeLLM(LLMClient):
    """Records every call and replies with a canned string or raises."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply if reply is not None else json.dumps(VALID_CONTENT)
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, system, user, model, max_tokens=1000, temperature=0.7):
        self.calls.append({
            "system": system,
            "user": user,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, tokens_used=42, model=model)


def make_record(
    topic: str = "cats",
    ai_model: str = "tngtech/deepseek-r1t2-chimera:free",
    created_at: datetime | None = None,
    tags: list[str] | None = None,
    is_favorite: bool = False,
    record_id: str = "rec",
    owner_id: str = "user_alice",
) -> ContentRecord:
    created_at = created_at or datetime.now(timezone.utc)
    return ContentRecord(
        id=record_id,
        owner_id=owner_id,
        topic=topic,
        titles=["t"],
        description="d",
        tags=tags if tags is not None else ["tag"],
        thumbnail_ideas=["th"],
        script_outline=["s"],
        ai_model=ai_model,
        is_favorite=is_favorite,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def registry():
    return load_registry()


@pytest.fixture
def store(tmp_path):
    s = ContentStore(str(tmp_path / "content.db"))
    s.init_db()
    return s


@pytest.fixture
def users_file(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps({
        "authorized_users": [
            {"id": "user_alice", "name": "Alice", "api_key": ALICE_KEY},
            {"id": "user_bob", "name": "Bob", "api_key": BOB_KEY},
        ]
    }))
    return path


@pytest.fixture
def settings(tmp_path, users_file):
    return Settings(
        environment="development",
        db_path=str(tmp_path / "api.db"),
        users_config=str(users_file),
    )


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def app(settings, fake_llm):
    return create_app(settings, llm=fake_llm)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def alice():
    return {"Authorization": f"Bearer {ALICE_KEY}"}


@pytest.fixture
def bob():
    return {"Authorization": f"Bearer {BOB_KEY}"}


def days_ago(days: float, now: datetime) -> datetime:
    return now - timedelta(days=days)
