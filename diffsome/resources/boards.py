"""Доски объявлений: доски, посты и комментарии к постам."""

from __future__ import annotations

from typing import Any

from diffsome.http_client import HttpClient
from diffsome.pagination import ListResponse


class BoardsResource:
    """Доски и посты."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    # ========== Доски ==========

    async def list(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/boards", params)

    async def get(self, id_or_slug: int | str) -> Any:
        return await self._http.get(f"/boards/{id_or_slug}")

    # ========== Посты ==========

    async def list_posts(
        self, board_id_or_slug: int | str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list(f"/boards/{board_id_or_slug}/posts", params)

    async def get_post(self, post_id: int) -> Any:
        return await self._http.get(f"/posts/{post_id}")

    async def create_post(self, data: dict[str, Any]) -> Any:
        """Создать пост (требуется авторизация)."""
        return await self._http.post("/posts", data)

    async def update_post(self, post_id: int, data: dict[str, Any]) -> Any:
        return await self._http.put(f"/posts/{post_id}", data)

    async def delete_post(self, post_id: int) -> Any:
        return await self._http.delete(f"/posts/{post_id}")

    # ========== Комментарии ==========

    async def list_comments(self, post_id: int) -> list[Any]:
        """Комментарии к посту (всегда список)."""
        response = await self._http.get_list(f"/posts/{post_id}/comments")
        return response.data

    async def create_comment(self, post_id: int, data: dict[str, Any]) -> Any:
        return await self._http.post(f"/posts/{post_id}/comments", data)

    async def update_comment(self, comment_id: int, data: dict[str, Any]) -> Any:
        return await self._http.put(f"/comments/{comment_id}", data)

    async def delete_comment(self, comment_id: int) -> Any:
        return await self._http.delete(f"/comments/{comment_id}")
