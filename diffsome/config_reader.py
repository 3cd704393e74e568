"""Конфигурация для Diffsome API клиента.

Читает настройки из YAML-файла, путь к которому указывается
в переменной окружения DIFFSOME_CONFIG.

Переменные окружения автоматически загружаются из .env файла.
"""

from collections.abc import Callable
from functools import lru_cache
from os import getenv
from pathlib import Path
from typing import Any, TypeVar, cast

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from yaml import SafeLoader, load

from diffsome.storage import StorageType

# Автоматически загружаем переменные из .env файла
load_dotenv()

ConfigType = TypeVar("ConfigType", bound=BaseModel)

DEFAULT_BASE_URL = "https://diffsome.com"
DEFAULT_TIMEOUT_MS = 30000

AuthStateCallback = Callable[[str | None, Any], None]


class ClientConfig(BaseModel):
    """Конфигурация для подключения к Diffsome API.

    Неизменяема после создания: идентификатор тенанта и остальные
    параметры фиксируются на всё время жизни клиента.
    """

    model_config = ConfigDict(frozen=True)

    # Идентификатор тенанта (сайта), входит в путь каждого запроса
    tenant_id: str

    # Базовый URL сервера, без завершающего слэша
    base_url: str = DEFAULT_BASE_URL

    # Таймаут запроса в миллисекундах
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)

    # API-ключ тенанта
    api_key: SecretStr | None = None

    # Начальный bearer-токен участника (перекрывает сохранённый)
    token: SecretStr | None = None

    # Сохранять ли токен в хранилище между перезапусками
    persist_token: bool = False

    # "local" — файл на диске, "session" — память процесса
    storage_type: StorageType = "local"

    # Ключ хранилища для токена (по умолчанию diffsome_auth_token_{tenant_id})
    storage_key: str | None = None

    # Каталог файлового хранилища (по умолчанию ~/.diffsome)
    storage_dir: Path | None = None

    # Вызывается при смене состояния авторизации: (token, user)
    on_auth_state_change: AuthStateCallback | None = Field(default=None, exclude=True)

    @field_validator("tenant_id")
    @classmethod
    def _validate_tenant_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("tenant_id не может быть пустым")
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def resolved_storage_key(self) -> str:
        """Ключ хранилища для токена авторизации."""
        return self.storage_key or f"diffsome_auth_token_{self.tenant_id}"

    @property
    def cart_session_key(self) -> str:
        """Ключ хранилища для гостевой сессии корзины."""
        return f"diffsome_cart_session_{self.tenant_id}"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


@lru_cache
def parse_config_file() -> dict[str, Any]:
    """Прочитать и распарсить YAML-файл конфигурации.

    Путь к файлу берётся из переменной окружения DIFFSOME_CONFIG.

    Returns:
        Словарь с конфигурацией

    Raises:
        ValueError: Если переменная окружения не задана
        FileNotFoundError: Если файл не найден
    """
    file_path = getenv("DIFFSOME_CONFIG")
    if file_path is None:
        raise ValueError(
            "Переменная окружения DIFFSOME_CONFIG не задана. "
            "Укажите путь к файлу конфигурации."
        )

    with open(file_path, "rb") as file:
        config_data = load(file, Loader=SafeLoader)

    if not isinstance(config_data, dict):
        raise ValueError("Конфигурация должна быть словарём")
    return config_data


@lru_cache
def get_config(model: type[ConfigType], root_key: str) -> ConfigType:  # noqa: UP047
    """Получить конфигурацию определённого типа из файла.

    Args:
        model: Pydantic-модель для валидации
        root_key: Корневой ключ в YAML-файле

    Returns:
        Экземпляр модели с заполненными значениями

    Raises:
        ValueError: Если ключ не найден в конфигурации
    """
    config_dict = parse_config_file()
    if root_key not in config_dict:
        raise ValueError(f"Ключ '{root_key}' не найден в конфигурации")
    return model.model_validate(config_dict[root_key])


def get_diffsome_config() -> ClientConfig:
    """Получить конфигурацию Diffsome.

    Удобная обёртка для получения ClientConfig.

    Returns:
        Экземпляр ClientConfig
    """
    return cast(ClientConfig, get_config(ClientConfig, "diffsome"))
