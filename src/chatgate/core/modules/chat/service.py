from typing import Any

import httpx
import structlog

from chatgate.core.core import Service
from chatgate.core.modules.chat.models import DEFAULT_PERSONA, ChatMessage, ChatReply, Persona, PersonaId
from chatgate.core.modules.chat.prompts import build_personas
from chatgate.core.modules.chat.utils import attach_image, build_generation_payload, extract_reply, parse_data_url
from chatgate.core.store import FlatStore
from chatgate.errors import RateLimitedError, ServiceUnavailableError, UpstreamError, ValidationError

logger = structlog.get_logger(__name__)

# Upstream statuses that mean the key is throttled or refused; the client should retry
RETRYABLE_STATUSES = (429, 403)


class ChatService(Service):
    """Relays conversations to the generative language API."""

    def __init__(self, store: FlatStore) -> None:
        super().__init__(store)
        self._client: httpx.AsyncClient | None = None

    async def on_start(self) -> None:
        """Open the upstream HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=self.core.config.upstream_timeout,
            transport=self.core.http_transport,
            headers={"Accept": "application/json"},
        )

    async def on_stop(self) -> None:
        """Close the upstream HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Chat service is not started")
        return self._client

    def get_personas(self) -> dict[PersonaId, Persona]:
        return build_personas(self.core.config)

    def resolve_persona(self, selector: str | None) -> Persona:
        """Map a client model selector to a persona, unknown values fall back to the default one."""
        personas = self.get_personas()
        if selector in personas:
            return personas[PersonaId(selector)]
        return personas[DEFAULT_PERSONA]

    async def chat(
        self, email: str, messages: list[ChatMessage] | None, selector: str | None, image_data_url: str | None
    ) -> ChatReply:
        """Send the conversation upstream and return the generated reply.

        Args:
            email: Account the request is made for
            messages: Conversation turns, oldest first; must not be empty
            selector: Persona selector sent by the client
            image_data_url: Optional `data:` URL attached to the last message

        Raises:
            ValidationError: Empty conversation or malformed image
            ServiceUnavailableError: No API key configured
            RateLimitedError: Upstream answered 429 or 403
            UpstreamError: Any other upstream failure
        """
        if not messages:
            raise ValidationError("Invalid messages format")

        api_key = self.core.keys.next()
        if api_key is None:
            raise ServiceUnavailableError

        persona = self.resolve_persona(selector)

        if image_data_url:
            messages = attach_image(messages, parse_data_url(image_data_url))

        payload = build_generation_payload(messages, persona)
        result = await self._generate(persona.model, api_key, payload)
        reply = extract_reply(result, persona.model)
        logger.info("chat_completed", email=email, persona=persona.id, model=persona.model, finish_reason=reply.finish_reason)
        return reply

    async def _generate(self, model: str, api_key: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST one generateContent request and return the decoded body of a successful response."""
        url = f"{self.core.config.gemini_api_base}/models/{model}:generateContent"
        try:
            response = await self.client.post(url, params={"key": api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.warning("upstream_request_failed", model=model, error=str(e))
            raise UpstreamError("Upstream request failed") from e

        if response.status_code in RETRYABLE_STATUSES:
            logger.warning("upstream_rate_limited", model=model, status=response.status_code)
            raise RateLimitedError

        try:
            result = response.json()
        except ValueError as e:
            logger.warning("upstream_invalid_body", model=model, status=response.status_code)
            raise UpstreamError("Invalid response from upstream API") from e

        if not response.is_success:
            error = result.get("error") if isinstance(result, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            if not isinstance(message, str):
                message = None
            logger.warning("upstream_error", model=model, status=response.status_code, message=message)
            raise UpstreamError(message or "API Error")

        if not isinstance(result, dict):
            raise UpstreamError("Invalid response from upstream API")
        return result
