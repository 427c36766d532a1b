import logging

from fastapi import APIRouter, Depends

from magus.api.deps import get_chat_service, get_current_session
from magus.controllers.chat import chat_controller
from magus.models.chat import ChatRequest, ChatResponse
from magus.models.session import SessionClaims

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=ChatResponse, summary="Send Chat Message")
async def send_message(
    request: ChatRequest,
    session: SessionClaims = Depends(get_current_session),
    chat_service=Depends(get_chat_service),
):
    """
    Sends a prompt to the chat backend and returns its reply.
    """
    return await chat_controller(request, session, chat_service)
