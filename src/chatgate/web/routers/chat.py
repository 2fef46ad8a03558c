from fastapi import APIRouter
from pydantic import BaseModel, Field

from chatgate.core.modules.chat.models import ChatMessage
from chatgate.web.deps import AppDep, CurrentEmailDep
from chatgate.web.openapi import ErrorResponse

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    """Conversation to relay upstream."""

    messages: list[ChatMessage] | None = Field(None, description="Conversation turns in upstream contents format")
    model: str | None = Field(None, description="Persona selector: wormgpt or visora")
    image_base64: str | None = Field(None, alias="imageBase64", description="Optional image as a data URL")
    token: str | None = Field(None, description="Session token, if not sent as Bearer header")


class ChatResponse(BaseModel):
    success: bool = True
    content: str
    finish_reason: str | None = Field(None, serialization_alias="finishReason")
    model_used: str = Field(..., serialization_alias="modelUsed")


@router.post(
    "/chat",
    summary="Send chat conversation",
    description="Relay the conversation to the generative model of the selected persona and return its reply.",
    operation_id="chat",
    responses={
        200: {"description": "Model reply"},
        400: {"model": ErrorResponse, "description": "Invalid messages or image"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        429: {"model": ErrorResponse, "description": "Rate limited, retry later"},
        500: {"model": ErrorResponse, "description": "Upstream error"},
        503: {"model": ErrorResponse, "description": "No API key configured"},
    },
)
async def chat(request: ChatRequest, app: AppDep, email: CurrentEmailDep) -> ChatResponse:
    reply = await app.chat(email, request.messages, request.model, request.image_base64)
    return ChatResponse(content=reply.content, finish_reason=reply.finish_reason, model_used=reply.model_used)
