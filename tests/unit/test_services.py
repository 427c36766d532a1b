"""
Unit tests for AuthService and UserService over the in-memory store.
"""

from datetime import timedelta

import pytest

from magus.core.exceptions import (
    InvalidCredentialsError,
    InvalidSessionError,
    SessionExpiredError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from magus.core.security import verify_password
from magus.models.user import UserRecord
from magus.services.auth_service import AuthService
from magus.services.user_service import UserService


@pytest.fixture
def auth_service(settings, user_store):
    return AuthService(settings, user_store)


@pytest.fixture
def user_service(settings, user_store):
    return UserService(settings, user_store)


async def test_login_returns_verifiable_token(auth_service, existing_user):
    token = await auth_service.login("  ALICE@example.com ", " secret123 ")

    claims = auth_service.verify_token(token)
    assert claims.email == "alice@example.com"
    assert claims.exp - claims.iat == 24 * 60 * 60


@pytest.mark.parametrize("email,password", [(None, "x"), ("a@example.com", None), ("", ""), (None, None)])
async def test_login_requires_both_fields(auth_service, email, password):
    with pytest.raises(ValidationError) as exc_info:
        await auth_service.login(email, password)
    assert exc_info.value.message == "Email and password are required"


async def test_login_unknown_user_and_wrong_password_look_the_same(auth_service, existing_user):
    with pytest.raises(InvalidCredentialsError) as unknown:
        await auth_service.login("bob@example.com", "secret123")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await auth_service.login("alice@example.com", "nope")

    assert unknown.value.message == wrong.value.message == "Invalid email or password"


async def test_login_user_without_hash(auth_service, user_store):
    await user_store.create_user(UserRecord(email="nohash@example.com"))

    with pytest.raises(InvalidCredentialsError):
        await auth_service.login("nohash@example.com", "whatever")


def test_get_session_tolerates_bad_tokens(auth_service, session_token):
    assert auth_service.get_session(None) is None
    assert auth_service.get_session("") is None
    assert auth_service.get_session("garbage") is None
    assert auth_service.get_session(session_token(ttl=timedelta(seconds=-5))) is None
    assert auth_service.get_session(session_token()).email == "alice@example.com"


def test_verify_token_expired(auth_service, session_token):
    with pytest.raises(SessionExpiredError):
        auth_service.verify_token(session_token(ttl=timedelta(seconds=-5)))


def test_verify_token_without_email(auth_service, session_token):
    with pytest.raises(InvalidSessionError):
        auth_service.verify_token(session_token(email=""))


async def test_create_user_normalizes_and_hashes(user_service, user_store):
    user = await user_service.create_user(" Bob@Example.com ", " hunter22 ")

    assert user.email == "bob@example.com"
    stored = user_store.items["bob@example.com"]
    assert stored.created_at is not None
    assert verify_password("hunter22", stored.password_hash)


async def test_create_user_rejects_short_password(user_service, user_store):
    with pytest.raises(ValidationError) as exc_info:
        await user_service.create_user("bob@example.com", "  12345  ")

    assert exc_info.value.message == "Password must be at least 6 characters"
    assert user_store.items == {}


async def test_create_user_duplicate(user_service, existing_user):
    with pytest.raises(UserAlreadyExistsError):
        await user_service.create_user("ALICE@example.com", "another1")


async def test_list_users_hides_hashes(user_service, existing_user):
    users = await user_service.list_users()

    assert [u.email for u in users] == ["alice@example.com"]
    assert "password_hash" not in users[0].model_dump()


async def test_reset_password(user_service, user_store, existing_user):
    await user_service.reset_password("alice@example.com", "newpass1")

    stored = user_store.items["alice@example.com"]
    assert verify_password("newpass1", stored.password_hash)
    assert not verify_password("secret123", stored.password_hash)
    assert stored.updated_at is not None


async def test_reset_password_unknown_user(user_service):
    with pytest.raises(UserNotFoundError):
        await user_service.reset_password("ghost@example.com", "newpass1")


async def test_delete_user(user_service, user_store, existing_user):
    await user_service.delete_user(" Alice@Example.com")

    assert user_store.items == {}


async def test_delete_user_requires_email(user_service):
    with pytest.raises(ValidationError) as exc_info:
        await user_service.delete_user("  ")
    assert exc_info.value.message == "Email is required"
