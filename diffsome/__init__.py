"""Модуль для работы с Diffsome API.

Предоставляет асинхронного клиента с авторизацией по API-ключу
и bearer-токену, нормализацией списковых ответов и сохранением
сессии (токен, гостевая корзина) между перезапусками.

Пример использования:
    from diffsome import Diffsome, get_diffsome_config

    config = get_diffsome_config()
    async with Diffsome.from_config(config) as client:
        # Блог
        posts = await client.blog.list({"per_page": 10})

        # Магазин
        products = await client.shop.list_products()
        cart = await client.shop.add_to_cart({"product_id": 1, "quantity": 2})
"""

from diffsome.client import Diffsome
from diffsome.config_reader import (
    ClientConfig,
    get_config,
    get_diffsome_config,
    parse_config_file,
)
from diffsome.exceptions import (
    DiffsomeConfigError,
    DiffsomeError,
)
from diffsome.http_client import HttpClient
from diffsome.pagination import (
    ListResponse,
    PaginationMeta,
    normalize_list_response,
)
from diffsome.session import UNSET_USER, SessionState
from diffsome.storage import (
    CredentialStore,
    FileStorage,
    KeyValueStorage,
    MemoryStorage,
    resolve_storage,
)

__all__ = [
    # Client
    "Diffsome",
    "HttpClient",
    # Configuration
    "ClientConfig",
    "get_config",
    "get_diffsome_config",
    "parse_config_file",
    # Exceptions
    "DiffsomeConfigError",
    "DiffsomeError",
    # Pagination
    "ListResponse",
    "PaginationMeta",
    "normalize_list_response",
    # Session
    "SessionState",
    "UNSET_USER",
    # Storage
    "CredentialStore",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "resolve_storage",
]
