from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from chatgate.app import SERVICE_NAME, App
from chatgate.config import Config
from chatgate.errors import UserError
from chatgate.web.error_handlers import general_exception_handler, request_validation_error_handler, user_error_handler
from chatgate.web.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from chatgate.web.openapi import set_custom_openapi
from chatgate.web.routers import auth_router, chat_router, health_router
from chatgate.web.static import SPAStaticFiles


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        # Store app instance and config in app state
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title=SERVICE_NAME,
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    # Middleware added last runs first: security headers wrap everything, including 429s and preflights
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.rate_limit_max,
        window_seconds=config.rate_limit_window_seconds,
    )
    if config.cors_origins:
        allow_any = "*" in config.cors_origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[] if allow_any else config.cors_origins,
            allow_origin_regex=".*" if allow_any else None,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(auth_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    # Front-end last, so it only answers paths no API route matched
    if Path(config.static_path).is_dir():
        app.mount("/", SPAStaticFiles(directory=config.static_path, html=True), name="static")

    return app
