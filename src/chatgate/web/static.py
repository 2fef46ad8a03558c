"""Front-end assets with a single-page-app fallback."""

from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

SPA_ENTRY = "index.html"


class SPAStaticFiles(StaticFiles):
    """Serve files from a directory; any path without a file gets the SPA entry page."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response(SPA_ENTRY, scope)
