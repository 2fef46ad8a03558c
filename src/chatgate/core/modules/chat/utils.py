import re
from typing import Any

from chatgate.core.modules.chat.models import ChatMessage, ChatReply, InlineImage, Persona
from chatgate.errors import UpstreamError, ValidationError

MAX_OUTPUT_TOKENS = 4096
TOP_P = 0.95
TOP_K = 40

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_NONE"

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[\w=.+-]+)*;base64,(?P<data>.+)$", re.DOTALL)


def parse_data_url(value: str) -> InlineImage:
    """Split a `data:<mime>;base64,<payload>` URL into MIME type and payload."""
    match = DATA_URL_RE.match(value.strip())
    if match is None:
        raise ValidationError("Invalid image data URL")
    return InlineImage(mime_type=match.group("mime"), data=match.group("data"))


def attach_image(messages: list[ChatMessage], image: InlineImage) -> list[ChatMessage]:
    """Return a copy of the conversation with the image appended to the last message's parts."""
    *head, last = messages
    updated = last.model_copy(update={"parts": [*last.parts, image.to_part()]})
    return [*head, updated]


def build_generation_payload(messages: list[ChatMessage], persona: Persona) -> dict[str, Any]:
    """Assemble the generateContent request body."""
    return {
        "contents": [message.model_dump(exclude_none=True) for message in messages],
        "generationConfig": {
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
            "temperature": persona.temperature,
            "topP": TOP_P,
            "topK": TOP_K,
        },
        "safetySettings": [{"category": category, "threshold": SAFETY_THRESHOLD} for category in SAFETY_CATEGORIES],
        "systemInstruction": {"parts": [{"text": persona.system_prompt}]},
    }


def extract_reply(result: dict[str, Any], model: str) -> ChatReply:
    """Pull the first candidate's text out of a generateContent response."""
    candidates = result.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        raise UpstreamError("No candidate in response")
    candidate = candidates[0]

    finish_reason = candidate.get("finishReason")
    if finish_reason == "SAFETY":
        raise UpstreamError("Response blocked by safety filters")
    if not isinstance(finish_reason, str):
        finish_reason = None

    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    first = parts[0] if isinstance(parts, list) and parts else None
    text = first.get("text") if isinstance(first, dict) else None
    if not isinstance(text, str) or not text:
        raise UpstreamError("Empty AI response")

    return ChatReply(content=text, finish_reason=finish_reason, model_used=model)
