"""Блог: посты, категории и теги."""

from __future__ import annotations

from typing import Any

from diffsome.http_client import HttpClient
from diffsome.pagination import ListResponse, coerce_list


class BlogResource:
    """Посты блога."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def list(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/blog", params)

    async def get(self, slug: str) -> Any:
        return await self._http.get(f"/blog/{slug}")

    async def get_by_id(self, post_id: int) -> Any:
        return await self._http.get(f"/blog/id/{post_id}")

    async def featured(self, limit: int = 5) -> list[Any]:
        """Избранные посты (всегда список).

        Args:
            limit: Максимальное количество постов
        """
        response = await self._http.get_list(
            "/blog", {"per_page": limit, "featured": True}
        )
        return response.data

    async def by_category(
        self, category: str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list("/blog", {**(params or {}), "category": category})

    async def by_tag(
        self, tag: str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list("/blog", {**(params or {}), "tag": tag})

    async def search(
        self, query: str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list("/blog", {**(params or {}), "search": query})

    async def categories(self) -> list[Any]:
        return coerce_list(await self._http.get("/blog/categories"))

    async def tags(self) -> list[Any]:
        return coerce_list(await self._http.get("/blog/tags"))
