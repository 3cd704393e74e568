"""Пользовательские сущности: определения схем и их записи.

Определения сущностей (схема полей) и записи доступны для полного
CRUD. Поля записи описываются схемой сущности и лежат в record["data"].
"""

from __future__ import annotations

from typing import Any

from diffsome.http_client import HttpClient
from diffsome.pagination import ListResponse


class EntitiesResource:
    """CRUD определений сущностей и их записей."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    # ========== Определения сущностей ==========

    async def list(self) -> list[Any]:
        """Все сущности тенанта (всегда список)."""
        response = await self._http.get_list("/entities")
        return response.data

    async def create(self, data: dict[str, Any]) -> Any:
        """Создать определение сущности.

        Args:
            data: {"name": ..., "slug": ..., "schema": {"fields": [...]}, ...}
        """
        return await self._http.post("/entities", data)

    async def get(self, slug: str) -> Any:
        """Определение сущности вместе со схемой."""
        return await self._http.get(f"/entities/{slug}")

    async def update(self, slug: str, data: dict[str, Any]) -> Any:
        return await self._http.put(f"/entities/{slug}", data)

    async def delete(self, slug: str, force: bool = False) -> Any:
        """Удалить определение сущности.

        Без force сервер отклонит удаление сущности, у которой есть записи.
        """
        params = {"force": "true"} if force else None
        return await self._http.delete(f"/entities/{slug}", params)

    async def get_schema(self, slug: str) -> Any:
        entity = await self.get(slug)
        return entity["schema"]

    # ========== Записи ==========

    async def list_records(
        self, slug: str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        """Записи сущности с пагинацией.

        Args:
            slug: Слаг сущности
            params: page, per_page, search, sort, dir, filters (JSON-строка)
        """
        return await self._http.get_list(f"/entities/{slug}/records", params)

    async def get_record(self, slug: str, record_id: int) -> Any:
        return await self._http.get(f"/entities/{slug}/records/{record_id}")

    async def create_record(self, slug: str, data: dict[str, Any]) -> Any:
        return await self._http.post(f"/entities/{slug}/records", data)

    async def update_record(self, slug: str, record_id: int, data: dict[str, Any]) -> Any:
        """Частично обновить запись: переданные поля заменяются, остальные сохраняются."""
        return await self._http.put(f"/entities/{slug}/records/{record_id}", data)

    async def delete_record(self, slug: str, record_id: int) -> Any:
        return await self._http.delete(f"/entities/{slug}/records/{record_id}")

    # ========== Вспомогательные ==========

    @staticmethod
    def get_value(record: dict[str, Any], field: str) -> Any:
        """Значение поля из record["data"] (None, если поля нет)."""
        data = record.get("data")
        if not isinstance(data, dict):
            return None
        return data.get(field)

    def typed(self, slug: str) -> EntityAccessor:
        """Доступ к записям одной сущности без повторения слага."""
        return EntityAccessor(self, slug)


class EntityAccessor:
    """Записи одной сущности."""

    def __init__(self, entities: EntitiesResource, slug: str) -> None:
        self._entities = entities
        self.slug = slug

    async def list(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._entities.list_records(self.slug, params)

    async def get(self, record_id: int) -> Any:
        return await self._entities.get_record(self.slug, record_id)

    async def create(self, data: dict[str, Any]) -> Any:
        return await self._entities.create_record(self.slug, data)

    async def update(self, record_id: int, data: dict[str, Any]) -> Any:
        return await self._entities.update_record(self.slug, record_id, data)

    async def delete(self, record_id: int) -> Any:
        return await self._entities.delete_record(self.slug, record_id)
