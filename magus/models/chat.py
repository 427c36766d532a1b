from pydantic import BaseModel
from typing import Optional


class ChatRequest(BaseModel):
    prompt: Optional[str] = None


class ChatResponse(BaseModel):
    """
    Response model for a single chat turn.
    """
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
