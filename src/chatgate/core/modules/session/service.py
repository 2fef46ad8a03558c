import secrets
from datetime import timedelta

import structlog

from chatgate.core.core import Service
from chatgate.core.modules.session.models import AuthToken, Session
from chatgate.errors import AuthenticationError
from chatgate.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing login sessions."""

    async def create_session(self, email: str) -> AuthToken:
        """Issue a new token for the email, dropping any sessions it already had."""
        auth_token = AuthToken(secrets.token_hex(32))
        created_at = now()
        session = Session(
            token=auth_token,
            email=email,
            created_at=created_at,
            expires_at=created_at + timedelta(days=self.core.config.session_ttl_days),
        )
        async with self.store.transaction() as document:
            document.sessions = [s for s in document.sessions if s.email != email]
            document.sessions.append(session)

        logger.info("session_created", email=email)
        return auth_token

    async def verify_session(self, auth_token: AuthToken | None) -> str | None:
        """Return the session email, or None if the token is unknown or expired.

        An expired session found here is deleted.
        """
        if not auth_token:
            return None

        document = await self.store.read()
        session = next((s for s in document.sessions if s.token == auth_token), None)
        if session is None:
            return None

        if session.is_expired():
            async with self.store.transaction() as document:
                document.sessions = [s for s in document.sessions if s.token != auth_token]
            logger.info("session_expired", email=session.email)
            return None

        return session.email

    async def get_authenticated_email(self, auth_token: AuthToken) -> str:
        """Resolve a live session to its email without touching the store."""
        document = await self.store.read()
        session = next((s for s in document.sessions if s.token == auth_token), None)
        if session is None or session.is_expired():
            raise AuthenticationError
        return session.email

    async def invalidate_session(self, auth_token: AuthToken | None) -> None:
        """Remove the session with this token. Unknown tokens are ignored."""
        async with self.store.transaction() as document:
            document.sessions = [s for s in document.sessions if s.token != auth_token]

    async def count_active_sessions(self) -> int:
        document = await self.store.read()
        current = now()
        return sum(1 for s in document.sessions if not s.is_expired(current))
