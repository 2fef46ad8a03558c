from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import cast

import httpx

from chatgate.config import Config
from chatgate.core.modules.keys.rotator import KeyRotator
from chatgate.core.store import FlatStore


class Service:
    """Base class for services with direct store access."""

    def __init__(self, store: FlatStore) -> None:
        self.store = store
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    from chatgate.core.modules.access.service import AccessService  # noqa: PLC0415
    from chatgate.core.modules.account.service import AccountService  # noqa: PLC0415
    from chatgate.core.modules.chat.service import ChatService  # noqa: PLC0415
    from chatgate.core.modules.session.service import SessionService  # noqa: PLC0415

    account: AccountService
    session: SessionService
    access: AccessService
    chat: ChatService

    def __init__(self, store: FlatStore) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        service_configs = [
            ("account", "chatgate.core.modules.account.service", "AccountService"),
            ("session", "chatgate.core.modules.session.service", "SessionService"),
            ("access", "chatgate.core.modules.access.service", "AccessService"),
            ("chat", "chatgate.core.modules.chat.service", "ChatService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(store)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, store, key pool, and all service instances."""

    config: Config
    store: FlatStore
    keys: KeyRotator
    services: Services

    def __init__(self, config: Config, http_transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize core with config, the JSON store, and auto-register services.

        `http_transport` replaces the network transport of the upstream client (used by tests).
        """
        self.config = config
        self.http_transport = http_transport
        self.store = FlatStore(config.database_path)
        self.keys = KeyRotator(config.gemini_api_keys)
        self.services = Services(self.store)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Create the store file and start all services."""
        self.store.initialize()
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services on shutdown."""
        await self.services.stop_all()
