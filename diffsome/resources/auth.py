"""Авторизация участников и управление профилем."""

import logging
from typing import Any

from diffsome.http_client import HttpClient

logger = logging.getLogger(__name__)


class AuthResource:
    """Вход, регистрация, выход и профиль участника.

    Токен из успешного ответа login/register/social_callback
    сохраняется в сессии клиента (и в хранилище при persist_token).
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def _remember(self, response: Any) -> Any:
        if isinstance(response, dict) and response.get("token"):
            self._http.set_token(response["token"], response.get("user"))
        return response

    async def login(self, credentials: dict[str, Any]) -> Any:
        """Войти по email и паролю.

        Args:
            credentials: {"email": ..., "password": ...}

        Returns:
            Ответ вида {"token": ..., "user": {...}}
        """
        response = await self._http.post("/auth/login", credentials)
        logger.info("Вход участника выполнен")
        return self._remember(response)

    async def register(self, data: dict[str, Any]) -> Any:
        """Зарегистрировать нового участника."""
        response = await self._http.post("/auth/register", data)
        return self._remember(response)

    async def logout(self) -> None:
        """Выйти из системы.

        Токен сбрасывается даже если запрос к серверу завершился ошибкой.
        """
        try:
            await self._http.post("/auth/logout")
            logger.info("Выход участника выполнен")
        finally:
            self._http.set_token(None)

    async def me(self) -> Any:
        return await self._http.get("/profile")

    async def update_profile(self, data: dict[str, Any]) -> Any:
        return await self._http.put("/profile", data)

    async def forgot_password(self, data: dict[str, Any]) -> Any:
        """Отправить письмо для сброса пароля."""
        return await self._http.post("/auth/forgot-password", data)

    async def reset_password(self, data: dict[str, Any]) -> Any:
        """Сбросить пароль по токену из письма."""
        return await self._http.post("/auth/reset-password", data)

    async def get_social_providers(self) -> Any:
        return await self._http.get("/auth/social/providers")

    async def get_social_auth_url(self, provider: str) -> Any:
        """Получить URL перенаправления для входа через соцсеть."""
        return await self._http.get(f"/auth/social/{provider}")

    async def social_callback(self, provider: str, code: str) -> Any:
        """Завершить вход через соцсеть по коду из callback."""
        response = await self._http.post(
            f"/auth/social/{provider}/callback", {"code": code}
        )
        return self._remember(response)

    def set_token(self, token: str | None) -> None:
        self._http.set_token(token)

    def get_token(self) -> str | None:
        return self._http.get_token()

    def is_authenticated(self) -> bool:
        return self._http.is_authenticated()
