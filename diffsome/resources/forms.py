"""Формы и отправленные заявки."""

from typing import Any

from diffsome.http_client import HttpClient
from diffsome.pagination import ListResponse


class FormsResource:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def list(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/forms", params)

    async def get(self, id_or_slug: int | str) -> Any:
        return await self._http.get(f"/forms/{id_or_slug}")

    async def submit(self, form_id_or_slug: int | str, data: dict[str, Any]) -> Any:
        """Отправить данные формы."""
        return await self._http.post(f"/forms/{form_id_or_slug}/submit", data)

    # ========== Требуется авторизация ==========

    async def my_submissions(
        self, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list("/form-submissions", params)

    async def get_submission(self, submission_id: int) -> Any:
        return await self._http.get(f"/form-submissions/{submission_id}")
