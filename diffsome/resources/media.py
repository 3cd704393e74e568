"""Медиафайлы участника."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from diffsome.http_client import FileInput, HttpClient


class MediaResource:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def list(self, params: dict[str, Any] | None = None) -> Any:
        return await self._http.get("/media", params)

    async def get(self, media_id: int) -> Any:
        return await self._http.get(f"/media/{media_id}")

    async def upload(self, file: FileInput) -> Any:
        return await self._http.upload("/media", file, "file")

    async def upload_multiple(self, files: Iterable[FileInput]) -> list[Any]:
        """Загрузить файлы последовательно, по одному запросу на файл."""
        results = []
        for file in files:
            results.append(await self.upload(file))
        return results

    async def delete(self, media_id: int) -> Any:
        return await self._http.delete(f"/media/{media_id}")
