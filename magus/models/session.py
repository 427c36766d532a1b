from typing import Optional

from pydantic import BaseModel


class SessionClaims(BaseModel):
    """
    Claims carried by a verified session token. ``iat`` and ``exp`` are
    JWT NumericDate values (seconds since the epoch).
    """
    email: str
    iat: int
    exp: int


class SessionResponse(BaseModel):
    authenticated: bool
    user: Optional[SessionClaims] = None


class LoginResponse(BaseModel):
    success: bool = True
