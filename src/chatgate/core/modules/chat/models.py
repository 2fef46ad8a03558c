from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PersonaId(StrEnum):
    """Recognized persona selectors."""

    WORMGPT = "wormgpt"
    VISORA = "visora"


DEFAULT_PERSONA = PersonaId.VISORA


class Persona(BaseModel):
    """Resolved chat behavior: upstream model, system prompt and sampling temperature."""

    id: PersonaId
    model: str
    system_prompt: str
    temperature: float


class ChatMessage(BaseModel):
    """One conversation turn in the upstream `contents` shape."""

    role: str | None = None
    parts: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class InlineImage(BaseModel):
    """Image decoded from a data URL, ready to be sent as an inline content part."""

    mime_type: str
    data: str

    def to_part(self) -> dict[str, Any]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


class ChatReply(BaseModel):
    """Text produced by the upstream model."""

    content: str = Field(..., description="Generated text")
    finish_reason: str | None = Field(None, serialization_alias="finishReason", description="Upstream finish reason")
    model_used: str = Field(..., serialization_alias="modelUsed", description="Upstream model name")
