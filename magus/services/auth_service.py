import logging
from datetime import timedelta
from typing import Optional

from starlette.concurrency import run_in_threadpool

from magus.core.config import Settings
from magus.core.exceptions import InvalidCredentialsError, InvalidSessionError, ValidationError
from magus.core.security import (
    create_session_token,
    decode_session_token,
    normalize_email,
    normalize_password,
    verify_password,
)
from magus.models.session import SessionClaims
from magus.services.database_service import DynamoDBUserStore

logger = logging.getLogger(__name__)


def read_session_claims(token: str, secret: str) -> SessionClaims:
    """Verify a session token and require the email claim it asserts."""
    claims = decode_session_token(token, secret)
    if not claims.get("email"):
        raise InvalidSessionError()
    return SessionClaims(email=claims["email"], iat=claims["iat"], exp=claims["exp"])


class AuthService:
    """Password login against the credential store and session token checks."""

    def __init__(self, settings: Settings, user_store: DynamoDBUserStore):
        self.settings = settings
        self.user_store = user_store
        self._secret = settings.AUTH_SECRET.get_secret_value()

    async def login(self, email: Optional[str], password: Optional[str]) -> str:
        """
        Checks the credentials and returns a signed session token.

        Unknown users, users without a stored hash and wrong passwords all
        fail with the same error so the response does not reveal which
        emails exist.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        normalized_email = normalize_email(email)
        if not normalized_email:
            raise ValidationError("Email and password are required")
        user = await self.user_store.get_user(normalized_email)

        if user is None or not user.password_hash:
            logger.warning("Failed login attempt for user: %s", normalized_email)
            raise InvalidCredentialsError()

        if not await run_in_threadpool(verify_password, normalize_password(password), user.password_hash):
            logger.warning("Failed login attempt for user: %s", normalized_email)
            raise InvalidCredentialsError()

        logger.info("User logged in: %s", user.email)
        return create_session_token(
            user.email,
            self._secret,
            timedelta(seconds=self.settings.session_max_age),
        )

    def verify_token(self, token: str) -> SessionClaims:
        return read_session_claims(token, self._secret)

    def get_session(self, token: Optional[str]) -> Optional[SessionClaims]:
        """Like verify_token, but an absent or bad token yields None."""
        if not token:
            return None
        try:
            return self.verify_token(token)
        except InvalidSessionError as e:
            logger.debug("Ignoring invalid session cookie: %s", e.message)
            return None
