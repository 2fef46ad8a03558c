from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from chatgate.app import SERVICE_NAME, VERSION

# Routes that do not require a session token
PUBLIC_ENDPOINTS = {
    ("POST", "/api/create-account"),
    ("POST", "/api/login"),
    ("POST", "/api/verify-session"),
    ("POST", "/api/logout"),
    ("GET", "/api/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=SERVICE_NAME,
            version=VERSION,
            summary="Chat gateway with persona prompts and session authentication",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Session token from /api/login. May also be sent as a `token` body field.",
            },
        }

        # Apply security globally (overridden for public endpoints)
        openapi_schema["security"] = [{"BearerAuth": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")
    retry: bool | None = Field(None, description="Set when the client should retry later")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "message": "Invalid email or password", "type": "invalid_credentials"},
                {"success": False, "message": "Rate limited. Please try again.", "type": "rate_limited", "retry": True},
                {"success": False, "message": "No API key available", "type": "service_unavailable"},
            ]
        }
    }
