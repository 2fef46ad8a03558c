"""Shared pytest fixtures."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from chatgate.config import Config
from chatgate.core.core import Core


class FakeUpstream:
    """Stands in for the generative language API through an httpx mock transport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = reply_body("Hello from Gemini")
        self.error: Exception | None = None

    def reply(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.body = body

    def reply_text(self, text: str, finish_reason: str = "STOP") -> None:
        self.reply(200, reply_body(text, finish_reason))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


def reply_body(text: str, finish_reason: str = "STOP") -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}, "finishReason": finish_reason}]}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_config(tmp_path) -> Callable[..., Config]:
    """Build a Config isolated from the environment, with overrides."""

    def factory(**overrides: Any) -> Config:
        values: dict[str, Any] = {
            "database_path": str(tmp_path / "database.json"),
            "static_path": str(tmp_path / "public"),
            "gemini_api_key_1": "key-1",
            "gemini_api_key_2": "key-2",
            "gemini_api_key_3": "",
            "gemini_api_key_4": "",
            "gemini_api_key_5": "",
            "system_prompt_worm": None,
            "system_prompt_visora": None,
        }
        values.update(overrides)
        return Config(_env_file=None, **values)

    return factory


@pytest.fixture
def config(make_config) -> Config:
    return make_config()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def core(config, upstream, anyio_backend):
    """Started Core with the fake upstream transport."""
    core = Core(config, upstream.transport)
    async with core.lifespan():
        yield core
