"""Domain errors raised by the services.

Each error carries the HTTP status and the client-facing message; the
handler registered in ``main.py`` turns them into ``{"error": ...}``
responses so services never build responses themselves.
"""

from fastapi import status


class MagusError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An unexpected error occurred"

    def __init__(self, message=None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(MagusError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidCredentialsError(MagusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class InvalidSessionError(MagusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class SessionExpiredError(InvalidSessionError):
    message = "Session has expired"


class UserNotFoundError(MagusError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class UserAlreadyExistsError(MagusError):
    status_code = status.HTTP_409_CONFLICT
    message = "User already exists"


class CredentialStoreError(MagusError):
    message = "Credential store request failed"


class CredentialStoreUnavailableError(CredentialStoreError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "DynamoDB table not found. Please deploy the CDK stack first."


class ChatBackendError(MagusError):
    message = "Failed to process message"
