import logging

from magus.core.exceptions import ValidationError
from magus.models.chat import ChatRequest, ChatResponse
from magus.models.session import SessionClaims

logger = logging.getLogger(__name__)


async def chat_controller(request: ChatRequest, session: SessionClaims, chat_service) -> ChatResponse:
    """Relay one prompt to the configured chat backend."""
    if not request.prompt or not request.prompt.strip():
        raise ValidationError("Prompt is required")

    logger.info("Chat prompt from %s (%d chars)", session.email, len(request.prompt))
    reply = await chat_service.generate_reply(request.prompt)
    return ChatResponse(message=reply)
