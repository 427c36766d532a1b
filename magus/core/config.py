from pydantic import SecretStr
from pydantic_settings import BaseSettings
from typing import Literal, Optional
from functools import lru_cache

DEFAULT_AUTH_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or a .env file.
    """
    # AWS Configuration. When the keys are absent the default botocore
    # credential chain (instance role, ~/.aws, ...) is used.
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_SESSION_TOKEN: Optional[str] = None
    AWS_DEFAULT_REGION: str = "us-east-1"
    DYNAMODB_ENDPOINT_URL: Optional[str] = None  # e.g. LocalStack or DynamoDB Local
    MAGUS_USER_AUTH_TABLE_NAME: str = "magus-user-auth"

    # Session configuration
    AUTH_SECRET: SecretStr = SecretStr(DEFAULT_AUTH_SECRET)
    SESSION_COOKIE_NAME: str = "auth-token"
    SESSION_TTL_HOURS: int = 24
    ENVIRONMENT: str = "development"

    # Password policy
    MIN_PASSWORD_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 10

    # Chat backend: 'stub' (constant reply) or 'azure_openai'
    CHAT_BACKEND: Literal["stub", "azure_openai"] = "stub"
    CHAT_STUB_REPLY: str = "Thank you"
    CHAT_MAX_TOKENS: int = 1024
    CHAT_SYSTEM_PROMPT: Optional[str] = None

    #OPENAI Configuration
    AZURE_OPENAI_API_KEY: Optional[SecretStr] = None
    AZURE_OPENAI_API_VERSION: Optional[str] = None
    AZURE_OPENAI_DEPLOYMENT_NAME: Optional[str] = None
    AZURE_OPENAI_ENDPOINT: Optional[str] = None

    # When set, /users and /api/users require a valid session too
    USERS_REQUIRE_SESSION: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_RICH: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def session_max_age(self) -> int:
        """Session lifetime in seconds, used for both the token and the cookie."""
        return self.SESSION_TTL_HOURS * 60 * 60


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the Settings object.
    """
    return Settings()
