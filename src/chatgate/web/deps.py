import json
from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chatgate.app import App
from chatgate.core.modules.session.models import AuthToken

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False, scheme_name="BearerAuth")


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def _get_body_token(request: Request) -> str | None:
    """Read a `token` field from a JSON request body, if there is one."""
    body = await request.body()
    if not body:
        return None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    token = data.get("token") if isinstance(data, dict) else None
    return token if isinstance(token, str) else None


async def get_current_email(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> str:
    """Resolve the account email from the Authorization Bearer header or a `token` body field."""

    # Check Bearer token first (preferred)
    token = credentials.credentials if credentials and credentials.scheme.lower() == "bearer" else None

    # Fallback to body field
    if not token:
        token = await _get_body_token(request)

    return await app.require_auth(AuthToken(token) if token else None)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
CurrentEmailDep = Annotated[str, Depends(get_current_email)]
