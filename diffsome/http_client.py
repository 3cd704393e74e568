"""HTTP-клиент Diffsome API.

Единая точка трансляции ошибок: любой исход запроса превращается
либо в распакованный payload, либо в DiffsomeError со статусом
(0 — транспорт, 408 — таймаут, иначе HTTP-статус ответа).
"""

import asyncio
import logging
from pathlib import Path
from types import TracebackType
from typing import IO, Any, Literal
from urllib.parse import quote

import httpx

from diffsome.config_reader import ClientConfig
from diffsome.exceptions import DiffsomeError
from diffsome.pagination import ListResponse, normalize_list_response
from diffsome.session import SessionState
from diffsome.storage import CredentialStore, KeyValueStorage, resolve_storage

logger = logging.getLogger(__name__)
logger.setLevel(level=logging.DEBUG)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})

FileInput = bytes | IO[bytes] | Path | tuple[Any, ...]


class HttpClient:
    """Конвейер запросов к API одного тенанта.

    Владеет SessionState и httpx.AsyncClient. Каждый вызов request/upload
    независим: без блокировок, без повторов, с одним дедлайном на вызов.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        storage: KeyValueStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Инициализация клиента.

        Args:
            config: Конфигурация клиента
            storage: Бэкенд хранилища; если не задан, выбирается по config.storage_type
            transport: Транспорт httpx (для тестов)
            client: Готовый httpx.AsyncClient; закрывать его должен вызывающий код
        """
        self._config = config
        self._tenant_id = config.tenant_id
        self._base_url = config.base_url
        self._timeout = config.timeout_seconds

        if storage is not None:
            token_backend: KeyValueStorage = storage
            cart_backend: KeyValueStorage = storage
        else:
            token_backend = resolve_storage(config.storage_type, config.storage_dir)
            # Корзина всегда хранится в долговременном хранилище
            cart_backend = resolve_storage("local", config.storage_dir)

        self._session = SessionState(
            config,
            token_store=CredentialStore(token_backend),
            cart_store=CredentialStore(cart_backend),
        )

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport, timeout=None)
        logger.debug("Создан HttpClient для tenant=%s", self._tenant_id)

    async def aclose(self) -> None:
        """Закрыть HTTP-сессию, если клиент создан здесь."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def session(self) -> SessionState:
        return self._session

    # ========== Состояние сессии ==========

    def set_token(self, token: str | None, user: Any = None) -> None:
        self._session.set_token(token, user)

    def get_token(self) -> str | None:
        return self._session.get_token()

    def is_authenticated(self) -> bool:
        return self._session.is_authenticated()

    def set_api_key(self, api_key: str | None) -> None:
        self._session.set_api_key(api_key)

    def get_api_key(self) -> str | None:
        return self._session.get_api_key()

    def set_cart_session_id(self, session_id: str | None) -> None:
        self._session.set_cart_session_id(session_id)

    def get_cart_session_id(self) -> str | None:
        return self._session.get_cart_session_id()

    # ========== URL и заголовки ==========

    def get_base_url(self) -> str:
        """Базовый URL API с путём тенанта."""
        return f"{self._base_url}/api/{self._tenant_id}"

    def get_download_url(self, download_token: str) -> str:
        """URL скачивания цифрового файла.

        Если есть токен участника, добавляется параметр auth_token.
        """
        url = f"{self._base_url}/download/{self._tenant_id}/{download_token}"
        token = self._session.get_token()
        if token:
            encoded = quote(token, safe="!*'()")
            return f"{url}?auth_token={encoded}"
        return url

    def _build_url(self, endpoint: str) -> str:
        return f"{self.get_base_url()}{endpoint}"

    @staticmethod
    def _format_param(value: Any) -> str:
        # Списки передаются одним значением через запятую
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (list, tuple)):
            return ",".join(HttpClient._format_param(item) for item in value)
        return str(value)

    @staticmethod
    def _build_params(params: dict[str, Any] | None) -> dict[str, str] | None:
        if not params:
            return None
        return {
            key: HttpClient._format_param(value)
            for key, value in params.items()
            if value is not None
        }

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        api_key = self._session.get_api_key()
        token = self._session.get_token()
        # API-ключ и bearer-токен отправляются вместе, если заданы оба
        if api_key:
            headers["X-API-Key"] = api_key
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _build_headers(self, custom_headers: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(custom_headers or {}),
        }
        headers.update(self._auth_headers())
        cart_session_id = self._session.get_cart_session_id()
        if cart_session_id:
            headers["X-Cart-Session"] = cart_session_id
        return headers

    # ========== Выполнение запросов ==========

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        # Ответы вида {success: true, data: ...}
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    async def _execute(
        self,
        method: str,
        endpoint: str,
        *,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        file: FileInput | None = None,
        field_name: str = "file",
        failure_message: str,
        timeout_message: str,
    ) -> Any:
        url = self._build_url(endpoint)
        logger.debug("%s %s", method, url)

        try:
            files = None
            if file is not None:
                if isinstance(file, Path):
                    file = (file.name, await asyncio.to_thread(file.read_bytes))
                files = {field_name: file}

            async with asyncio.timeout(self._timeout):
                response = await self._client.request(
                    method,
                    url,
                    params=self._build_params(params),
                    headers=headers,
                    json=body,
                    files=files,
                )
            payload = self._decode(response)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.error("Таймаут запроса %s %s (%.1f c)", method, url, self._timeout)
            raise DiffsomeError(timeout_message, 408, original_error=exc) from exc
        except Exception as exc:
            logger.error("Ошибка транспорта %s %s: %s", method, url, exc)
            raise DiffsomeError(str(exc) or "Unknown error", 0, original_error=exc) from exc

        if not response.is_success:
            message = None
            errors = None
            if isinstance(payload, dict):
                message = payload.get("message")
                errors = payload.get("errors")
            logger.error(
                "Ошибка API %s %s: %d %s",
                method,
                url,
                response.status_code,
                message or failure_message,
            )
            raise DiffsomeError(message or failure_message, response.status_code, errors)

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return self._unwrap(payload)

    async def request(
        self,
        endpoint: str,
        method: HttpMethod = "GET",
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Выполнить JSON-запрос к API.

        Args:
            endpoint: Путь относительно /api/{tenant_id}, начинается с "/"
            method: HTTP-метод
            body: Тело запроса (сериализуется в JSON)
            params: Query-параметры; значения None отбрасываются
            headers: Дополнительные заголовки

        Returns:
            Поле data ответа, если оно есть, иначе весь ответ

        Raises:
            DiffsomeError: При HTTP-ошибке, таймауте или ошибке транспорта
            ValueError: При неподдерживаемом HTTP-методе
        """
        verb = method.upper()
        if verb not in HTTP_METHODS:
            raise ValueError(f"Неподдерживаемый HTTP-метод: {method}")

        return await self._execute(
            verb,
            endpoint,
            headers=self._build_headers(headers),
            params=params,
            body=body,
            failure_message="Request failed",
            timeout_message="Request timeout",
        )

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request(endpoint, "GET", params=params)

    async def get_list(
        self, endpoint: str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        """GET для списковых эндпоинтов.

        Всегда возвращает ListResponse: data — список, meta заполнена.
        """
        response = await self.request(endpoint, "GET", params=params)
        return normalize_list_response(response)

    async def post(self, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request(endpoint, "POST", body=body)

    async def put(self, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request(endpoint, "PUT", body=body)

    async def patch(self, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request(endpoint, "PATCH", body=body)

    async def delete(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request(endpoint, "DELETE", params=params)

    async def upload(
        self, endpoint: str, file: FileInput, field_name: str = "file"
    ) -> Any:
        """Загрузить файл multipart-запросом.

        Content-Type не задаётся: boundary проставляет транспорт.

        Args:
            endpoint: Путь относительно /api/{tenant_id}
            file: Байты, бинарный файловый объект, Path или кортеж (имя, данные[, тип])
            field_name: Имя поля формы

        Returns:
            Поле data ответа, если оно есть, иначе весь ответ

        Raises:
            DiffsomeError: При HTTP-ошибке, таймауте или ошибке транспорта
        """
        headers = {"Accept": "application/json", **self._auth_headers()}
        return await self._execute(
            "POST",
            endpoint,
            headers=headers,
            file=file,
            field_name=field_name,
            failure_message="Upload failed",
            timeout_message="Upload timeout",
        )
