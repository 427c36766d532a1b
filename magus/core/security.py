import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from magus.core.exceptions import InvalidSessionError, SessionExpiredError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    """Users are keyed by trimmed, lower-cased email."""
    return email.strip().lower()


def normalize_password(password: str) -> str:
    return password.strip()


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password using bcrypt.

    Longer passwords are truncated to 72 bytes, the same input bcrypt
    implementations that accept long passwords actually hash.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its hash.

    A stored value that is not a bcrypt hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_session_token(email: str, secret: str, ttl: timedelta) -> str:
    """Sign a session token asserting ``email`` for ``ttl``."""
    now = datetime.now(timezone.utc)
    payload = {
        "email": email,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_session_token(token: str, secret: str) -> Dict[str, Any]:
    """Verify signature and expiry and return the claims.

    Raises:
        SessionExpiredError: the token was valid but has expired.
        InvalidSessionError: anything else wrong with the token.
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise SessionExpiredError()
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected session token: %s", e)
        raise InvalidSessionError()
