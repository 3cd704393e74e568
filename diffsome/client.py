"""Фасад Diffsome API.

Один экземпляр на конфигурацию: владеет HttpClient (а через него
состоянием сессии) и предоставляет ресурсы API как атрибуты.
"""

import logging
from types import TracebackType

import httpx

from diffsome.config_reader import ClientConfig
from diffsome.exceptions import DiffsomeConfigError
from diffsome.http_client import HttpClient
from diffsome.resources import (
    AuthResource,
    BlogResource,
    BoardsResource,
    CommentsResource,
    EntitiesResource,
    FormsResource,
    MediaResource,
    ReservationResource,
    ShopResource,
)
from diffsome.storage import KeyValueStorage

logger = logging.getLogger(__name__)
logger.setLevel(level=logging.DEBUG)


class Diffsome:
    """Клиент Diffsome API.

    Использование:
        async with Diffsome(ClientConfig(tenant_id="my-site", api_key="pky_...")) as client:
            posts = await client.blog.list()
            products = await client.shop.list_products()
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        storage: KeyValueStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Инициализация клиента.

        Args:
            config: Конфигурация клиента
            storage: Бэкенд хранилища вместо выбранного по config.storage_type
            transport: Транспорт httpx (для тестов)
            http_client: Готовый httpx.AsyncClient

        Raises:
            DiffsomeConfigError: Если не задан API-ключ
        """
        if config.api_key is None or not config.api_key.get_secret_value():
            raise DiffsomeConfigError(
                "API key is required. Get your API key from "
                "Dashboard > Settings > API Tokens"
            )

        self._http = HttpClient(
            config, storage=storage, transport=transport, client=http_client
        )

        self.auth = AuthResource(self._http)
        self.boards = BoardsResource(self._http)
        self.blog = BlogResource(self._http)
        self.comments = CommentsResource(self._http)
        self.forms = FormsResource(self._http)
        self.shop = ShopResource(self._http)
        self.media = MediaResource(self._http)
        self.entities = EntitiesResource(self._http)
        self.reservation = ReservationResource(self._http)
        logger.debug("Создан клиент Diffsome для tenant=%s", config.tenant_id)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Diffsome":
        """Создать клиент из конфигурации (например, из YAML-файла).

        Args:
            config: Конфигурация Diffsome

        Returns:
            Экземпляр Diffsome
        """
        return cls(config)

    @property
    def http(self) -> HttpClient:
        return self._http

    async def aclose(self) -> None:
        """Закрыть HTTP-сессию."""
        await self._http.aclose()

    async def __aenter__(self) -> "Diffsome":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated()

    def set_token(self, token: str | None) -> None:
        """Установить токен участника вручную."""
        self.auth.set_token(token)

    def get_token(self) -> str | None:
        return self.auth.get_token()

    def set_api_key(self, api_key: str | None) -> None:
        """Установить API-ключ для серверных интеграций."""
        self._http.set_api_key(api_key)

    def get_api_key(self) -> str | None:
        return self._http.get_api_key()
