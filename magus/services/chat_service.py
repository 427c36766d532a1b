import logging
from typing import List

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import AzureChatOpenAI

from magus.core.config import Settings
from magus.core.exceptions import ChatBackendError

logger = logging.getLogger(__name__)


class StubChatService:
    """
    Answers every prompt with a fixed reply. Used until a hosted model is
    configured, and in local development.
    """

    def __init__(self, settings: Settings):
        self.reply = settings.CHAT_STUB_REPLY

    async def generate_reply(self, prompt: str) -> str:
        logger.debug("Stub chat backend answering prompt of %d chars", len(prompt))
        return self.reply


class AzureChatService:
    """
    Relays a prompt to an Azure OpenAI chat deployment and returns its answer.
    """

    def __init__(self, settings: Settings):
        """
        Initializes the AzureChatOpenAI client from the application settings.

        Args:
            settings: The application settings object.
        """
        self.settings = settings
        if not (settings.AZURE_OPENAI_API_KEY and settings.AZURE_OPENAI_ENDPOINT
                and settings.AZURE_OPENAI_DEPLOYMENT_NAME):
            raise ChatBackendError("Azure OpenAI chat backend is not configured")
        try:
            logger.info("Initializing AzureChatOpenAI model for ChatService.")
            self.model = AzureChatOpenAI(
                openai_api_version=settings.AZURE_OPENAI_API_VERSION,
                azure_deployment=settings.AZURE_OPENAI_DEPLOYMENT_NAME,
                azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
                api_key=settings.AZURE_OPENAI_API_KEY.get_secret_value(),
                max_tokens=settings.CHAT_MAX_TOKENS,
                max_retries=0,
            )
        except Exception as e:
            logger.error("Failed to initialize AzureChatOpenAI model: %s", e, exc_info=True)
            raise ChatBackendError() from e

    def _build_messages(self, prompt: str) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        if self.settings.CHAT_SYSTEM_PROMPT:
            messages.append(SystemMessage(content=self.settings.CHAT_SYSTEM_PROMPT))
        messages.append(HumanMessage(content=prompt))
        return messages

    async def generate_reply(self, prompt: str) -> str:
        """
        Sends the prompt to the model in a single call.

        Args:
            prompt: The user's message text.

        Returns:
            The model's text answer.
        """
        try:
            logger.info("Invoking model for chat reply.")
            response = await self.model.ainvoke(self._build_messages(prompt))
            logger.info("Successfully received chat reply from model.")
            return str(response.content)
        except Exception as e:
            logger.error("Error generating chat reply: %s", e, exc_info=True)
            raise ChatBackendError() from e


def build_chat_service(settings: Settings):
    """Pick the chat backend named by CHAT_BACKEND."""
    if settings.CHAT_BACKEND == "stub":
        return StubChatService(settings)
    if settings.CHAT_BACKEND == "azure_openai":
        return AzureChatService(settings)
    raise ChatBackendError(f"Unknown chat backend: {settings.CHAT_BACKEND}")
