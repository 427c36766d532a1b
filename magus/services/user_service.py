import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from starlette.concurrency import run_in_threadpool

from magus.core.config import Settings
from magus.core.exceptions import UserAlreadyExistsError, UserNotFoundError, ValidationError
from magus.core.security import hash_password, normalize_email, normalize_password
from magus.models.user import User, UserRecord
from magus.services.database_service import DynamoDBUserStore

logger = logging.getLogger(__name__)


class UserService:
    """User administration: list, sign-up, password reset and delete."""

    def __init__(self, settings: Settings, user_store: DynamoDBUserStore):
        self.settings = settings
        self.user_store = user_store

    def _check_credentials(self, email: Optional[str], password: Optional[str]) -> Tuple[str, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")
        normalized_email = normalize_email(email)
        normalized_password = normalize_password(password)
        if not normalized_email:
            raise ValidationError("Email and password are required")
        if len(normalized_password) < self.settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {self.settings.MIN_PASSWORD_LENGTH} characters"
            )
        return normalized_email, normalized_password

    async def _hash(self, password: str) -> str:
        # bcrypt is CPU-bound; keep it off the event loop
        return await run_in_threadpool(hash_password, password, self.settings.BCRYPT_ROUNDS)

    async def list_users(self) -> List[User]:
        records = await self.user_store.list_users()
        return [record.to_public() for record in records]

    async def create_user(self, email: Optional[str], password: Optional[str]) -> User:
        normalized_email, normalized_password = self._check_credentials(email, password)

        if await self.user_store.get_user(normalized_email, operation="create user") is not None:
            logger.info("Refusing to create existing user %s", normalized_email)
            raise UserAlreadyExistsError()

        record = UserRecord(
            email=normalized_email,
            password_hash=await self._hash(normalized_password),
            created_at=datetime.now(timezone.utc),
        )
        await self.user_store.create_user(record)
        return User(email=normalized_email)

    async def reset_password(self, email: Optional[str], password: Optional[str]) -> None:
        normalized_email, normalized_password = self._check_credentials(email, password)

        if await self.user_store.get_user(normalized_email, operation="reset password") is None:
            raise UserNotFoundError()

        password_hash = await self._hash(normalized_password)
        await self.user_store.update_password(
            normalized_email, password_hash, datetime.now(timezone.utc)
        )
        logger.info("Password reset for %s", normalized_email)

    async def delete_user(self, email: Optional[str]) -> None:
        if not email or not email.strip():
            raise ValidationError("Email is required")
        await self.user_store.delete_user(normalize_email(email))
