"""Состояние сессии клиента: токен, API-ключ и гостевая корзина.

SessionState — единственный источник истины о том, кто выполняет
запросы и какой гостевой корзиной он владеет. При включённом
persist_token токен переживает перезапуск процесса через хранилище.
"""

import logging
from typing import Any

from pydantic import SecretStr

from diffsome.config_reader import AuthStateCallback, ClientConfig
from diffsome.storage import CredentialStore

logger = logging.getLogger(__name__)


class _UnsetUser:
    """Маркер: пользователь ещё не загружен (токен восстановлен из хранилища)."""

    _instance: "_UnsetUser | None" = None

    def __new__(cls) -> "_UnsetUser":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET_USER"


UNSET_USER: Any = _UnsetUser()


def _secret_or_none(secret: SecretStr | None) -> str | None:
    if secret is None:
        return None
    return secret.get_secret_value() or None


class SessionState:
    """Состояние авторизации одного клиента.

    Токен восстанавливается из хранилища при создании (если включён
    persist_token), затем явный токен из конфигурации перекрывает
    восстановленный. Идентификатор корзины восстанавливается всегда,
    независимо от persist_token.
    """

    def __init__(
        self,
        config: ClientConfig,
        token_store: CredentialStore,
        cart_store: CredentialStore,
    ) -> None:
        """Инициализация состояния.

        Args:
            config: Конфигурация клиента
            token_store: Хранилище для токена авторизации
            cart_store: Хранилище для идентификатора гостевой корзины
        """
        self._tenant_id = config.tenant_id
        self._persist_token = config.persist_token
        self._storage_key = config.resolved_storage_key
        self._cart_session_key = config.cart_session_key
        self._on_auth_state_change: AuthStateCallback | None = config.on_auth_state_change
        self._token_store = token_store
        self._cart_store = cart_store

        self._token: str | None = None
        # Пустые строки в конфигурации равносильны отсутствию значения
        self._api_key: str | None = _secret_or_none(config.api_key)
        self._cart_session_id: str | None = self._cart_store.read(self._cart_session_key)

        if self._persist_token:
            self._restore_token()

        # Явный токен из конфигурации перекрывает сохранённый
        config_token = _secret_or_none(config.token)
        if config_token:
            self._token = config_token

    def _restore_token(self) -> None:
        saved_token = self._token_store.read(self._storage_key)
        if not saved_token:
            return
        self._token = saved_token
        logger.info("Токен восстановлен из хранилища для tenant=%s", self._tenant_id)
        # Данные пользователя при восстановлении неизвестны
        self._notify(saved_token, UNSET_USER)

    def _notify(self, token: str | None, user: Any) -> None:
        if self._on_auth_state_change is not None:
            self._on_auth_state_change(token, user)

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    # ========== Токен ==========

    def set_token(self, token: str | None, user: Any = None) -> None:
        """Установить токен авторизации.

        При включённом persist_token сохраняет токен в хранилище
        (или удаляет ключ, если token=None). Обработчик смены состояния
        вызывается всегда, даже без сохранения.

        Args:
            token: Токен или None для выхода
            user: Данные пользователя для обработчика
        """
        self._token = token

        if self._persist_token:
            if token:
                self._token_store.write(self._storage_key, token)
            else:
                self._token_store.remove(self._storage_key)

        logger.debug(
            "Токен %s для tenant=%s",
            "установлен" if token else "сброшен",
            self._tenant_id,
        )
        self._notify(token, user)

    def get_token(self) -> str | None:
        return self._token

    def is_authenticated(self) -> bool:
        """Есть ли токен или API-ключ."""
        return self._token is not None or self._api_key is not None

    # ========== API-ключ ==========

    def set_api_key(self, api_key: str | None) -> None:
        self._api_key = api_key

    def get_api_key(self) -> str | None:
        return self._api_key

    # ========== Гостевая корзина ==========

    def set_cart_session_id(self, session_id: str | None) -> None:
        """Установить идентификатор гостевой корзины и сохранить его."""
        self._cart_session_id = session_id
        if session_id:
            self._cart_store.write(self._cart_session_key, session_id)
        else:
            self._cart_store.remove(self._cart_session_key)

    def get_cart_session_id(self) -> str | None:
        return self._cart_session_id
