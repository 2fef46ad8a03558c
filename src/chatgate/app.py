from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx

from chatgate.config import Config
from chatgate.core.core import Core
from chatgate.core.modules.chat.models import ChatMessage, ChatReply
from chatgate.core.modules.session.models import AuthToken
from chatgate.errors import InvalidCredentialsError
from chatgate.utils import now

SERVICE_NAME = "WormGPT & Visora AI API"
VERSION = "2.1.0"


class App:
    """Facade for all application operations, checks authentication before delegating to Core."""

    def __init__(self, config: Config, http_transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._core = Core(config, http_transport)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def create_account(self, email: str, password: str) -> str:
        """Register a new account and return its email."""
        account = await self._core.services.account.create_account(email, password)
        return account.email

    async def login(self, email: str, password: str) -> AuthToken:
        """Authenticate account and create session."""
        if not await self._core.services.account.verify_password(email, password):
            raise InvalidCredentialsError
        return await self._core.services.session.create_session(email)

    async def verify_session(self, auth_token: AuthToken | None) -> str | None:
        """Return the email of a live session, or None. Expired sessions are removed."""
        return await self._core.services.session.verify_session(auth_token)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Invalidate session, unknown tokens are ignored."""
        await self._core.services.session.invalidate_session(auth_token)

    async def require_auth(self, auth_token: AuthToken | None) -> str:
        """Resolve the email behind a token, raise AuthenticationError if there is no live session."""
        return await self._core.services.access.ensure_authenticated(auth_token)

    async def chat(
        self, email: str, messages: list[ChatMessage] | None, model: str | None, image_data_url: str | None
    ) -> ChatReply:
        """Relay a conversation for an authenticated account."""
        return await self._core.services.chat.chat(email, messages, model, image_data_url)

    async def get_health(self) -> dict[str, object]:
        """Report key pool size, personas, and account/session counts."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": VERSION,
            "availableKeys": self._core.keys.size,
            "models": [str(persona_id) for persona_id in self._core.services.chat.get_personas()],
            "totalAccounts": await self._core.services.account.count_accounts(),
            "activeSessions": await self._core.services.session.count_active_sessions(),
            "timestamp": now().isoformat(),
        }
