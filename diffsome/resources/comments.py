"""Комментарии к постам досок, блога и отдельным страницам."""

from typing import Any

from diffsome.http_client import HttpClient


class CommentsResource:
    """Комментарии.

    Standalone-комментарии привязаны к слагу страницы
    (гостевая книга, отзывы и т.п.).
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def board_post(self, post_id: int, params: dict[str, Any] | None = None) -> Any:
        return await self._http.get(f"/posts/{post_id}/comments", params)

    async def create_board_post(self, post_id: int, data: dict[str, Any]) -> Any:
        return await self._http.post(f"/posts/{post_id}/comments", data)

    async def blog_post(self, slug: str, params: dict[str, Any] | None = None) -> Any:
        return await self._http.get(f"/blog/{slug}/comments", params)

    async def create_blog_post(self, slug: str, data: dict[str, Any]) -> Any:
        return await self._http.post(f"/blog/{slug}/comments", data)

    async def standalone(self, page_slug: str, params: dict[str, Any] | None = None) -> Any:
        return await self._http.get(f"/comments/{page_slug}", params)

    async def create_standalone(self, page_slug: str, data: dict[str, Any]) -> Any:
        return await self._http.post(f"/comments/{page_slug}", data)

    async def update(self, comment_id: int, data: dict[str, Any]) -> Any:
        return await self._http.put(f"/comments/{comment_id}", data)

    async def delete(self, comment_id: int, data: dict[str, Any] | None = None) -> Any:
        """Удалить комментарий.

        Args:
            comment_id: ID комментария
            data: {"password": ...} для гостевых комментариев
        """
        return await self._http.delete(f"/comments/{comment_id}", data)

    async def like(self, comment_id: int) -> Any:
        return await self._http.post(f"/comments/{comment_id}/like")
