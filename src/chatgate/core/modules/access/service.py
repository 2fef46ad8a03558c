from chatgate.core.core import Service
from chatgate.core.modules.session.models import AuthToken
from chatgate.errors import AuthenticationError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken | None) -> str:
        """Ensure the token belongs to a live session and return its email."""
        if not auth_token:
            raise AuthenticationError("Token not found")
        return await self.core.services.session.get_authenticated_email(auth_token)
