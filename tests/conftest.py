"""Pytest configuration and shared fixtures."""

import os

# Settings are cached on first use, so the environment has to be in place
# before the application is imported.
os.environ["AUTH_SECRET"] = "test-secret-key"
os.environ["CHAT_BACKEND"] = "stub"
os.environ["LOG_RICH"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["USERS_REQUIRE_SESSION"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from magus.api.deps import get_chat_service, get_user_store
from magus.core.config import get_settings
from magus.core.exceptions import UserAlreadyExistsError, UserNotFoundError
from magus.core.security import create_session_token, hash_password
from magus.models.user import UserRecord

from main import app


# ============================================================================
# Fakes
# ============================================================================

class InMemoryUserStore:
    """Stands in for DynamoDBUserStore with the same methods and errors."""

    def __init__(self):
        self.items: Dict[str, UserRecord] = {}

    async def get_user(self, email: str, operation: str = "fetch user") -> Optional[UserRecord]:
        return self.items.get(email)

    async def list_users(self) -> List[UserRecord]:
        return list(self.items.values())

    async def create_user(self, record: UserRecord) -> None:
        if record.email in self.items:
            raise UserAlreadyExistsError()
        self.items[record.email] = record

    async def update_password(self, email: str, password_hash: str, updated_at: datetime) -> None:
        if email not in self.items:
            raise UserNotFoundError()
        self.items[email] = self.items[email].model_copy(
            update={"password_hash": password_hash, "updated_at": updated_at}
        )

    async def delete_user(self, email: str) -> None:
        self.items.pop(email, None)


class FakeChatService:
    def __init__(self, reply: str = "Hello from the model"):
        self.reply = reply
        self.prompts: List[str] = []

    async def generate_reply(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def chat_service():
    return FakeChatService()


@pytest.fixture
async def client(user_store):
    """Async HTTP client against the app with an in-memory credential store."""
    app.dependency_overrides[get_user_store] = lambda: user_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def use_fake_chat(chat_service):
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    return chat_service


@pytest.fixture
async def existing_user(user_store):
    """A stored user with password 'secret123'."""
    record = UserRecord(
        email="alice@example.com",
        password_hash=hash_password("secret123", rounds=4),
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    await user_store.create_user(record)
    return record


@pytest.fixture
def session_token(settings):
    """Factory for session tokens signed with the test secret."""
    def _factory(email: str = "alice@example.com", ttl: timedelta = timedelta(hours=1)) -> str:
        return create_session_token(email, settings.AUTH_SECRET.get_secret_value(), ttl)
    return _factory
