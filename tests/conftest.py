"""Общие фикстуры для тестов diffsome.

Сеть подменяется httpx.MockTransport, хранилище — MemoryStorage.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import httpx
import pytest

from diffsome import ClientConfig, Diffsome, HttpClient, MemoryStorage

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class RecordingHandler:
    """Обработчик MockTransport, запоминающий все запросы."""

    def __init__(self, handler: Handler | None = None) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._handler is None:
            return httpx.Response(200, json={"data": None})
        response = self._handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "Запросов не было"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def json_response(payload: Any, status: int = 200) -> Handler:
    """Обработчик, всегда отвечающий заданным JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return handler


@pytest.fixture
def storage() -> MemoryStorage:
    """Чистое хранилище в памяти."""
    return MemoryStorage()


@pytest.fixture
def make_config() -> Callable[..., ClientConfig]:
    """Фабрика конфигурации с тестовыми значениями по умолчанию."""

    def factory(**overrides: Any) -> ClientConfig:
        values: dict[str, Any] = {
            "tenant_id": "demo",
            "base_url": "https://api.example.com",
            "api_key": "pky_test",
        }
        values.update(overrides)
        return ClientConfig(**values)

    return factory


@pytest.fixture
async def make_http(
    make_config: Callable[..., ClientConfig],
    storage: MemoryStorage,
) -> AsyncGenerator[Callable[..., tuple[HttpClient, RecordingHandler]], None]:
    """Фабрика HttpClient поверх MockTransport."""
    clients: list[HttpClient] = []

    def factory(
        handler: Handler | None = None, **overrides: Any
    ) -> tuple[HttpClient, RecordingHandler]:
        recorder = RecordingHandler(handler)
        client = HttpClient(
            make_config(**overrides),
            storage=storage,
            transport=httpx.MockTransport(recorder),
        )
        clients.append(client)
        return client, recorder

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
async def make_client(
    make_config: Callable[..., ClientConfig],
    storage: MemoryStorage,
) -> AsyncGenerator[Callable[..., tuple[Diffsome, RecordingHandler]], None]:
    """Фабрика фасада Diffsome поверх MockTransport."""
    clients: list[Diffsome] = []

    def factory(
        handler: Handler | None = None, **overrides: Any
    ) -> tuple[Diffsome, RecordingHandler]:
        recorder = RecordingHandler(handler)
        client = Diffsome(
            make_config(**overrides),
            storage=storage,
            transport=httpx.MockTransport(recorder),
        )
        clients.append(client)
        return client, recorder

    yield factory

    for client in clients:
        await client.aclose()
