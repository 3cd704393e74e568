"""Бронирование услуг и временных слотов."""

from __future__ import annotations

from typing import Any

from diffsome.http_client import HttpClient
from diffsome.pagination import ListResponse, coerce_list


class ReservationResource:
    """Бронирования.

    Настройки, услуги, сотрудники и свободные слоты доступны публично,
    создание и просмотр бронирований требуют авторизации.
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    # ========== Публичные ==========

    async def get_settings(self) -> Any:
        return await self._http.get("/reservation/settings")

    async def list_services(self) -> list[Any]:
        response = await self._http.get_list("/reservation/services")
        return response.data

    async def list_staff(self, service_id: int | None = None) -> list[Any]:
        """Сотрудники, при необходимости отфильтрованные по услуге."""
        params = {"service_id": service_id} if service_id else None
        response = await self._http.get_list("/reservation/staffs", params)
        return response.data

    async def get_available_dates(self, params: dict[str, Any]) -> list[str]:
        """Свободные даты в формате YYYY-MM-DD."""
        return coerce_list(await self._http.get("/reservation/available-dates", params))

    async def get_available_slots(self, params: dict[str, Any]) -> list[Any]:
        return coerce_list(await self._http.get("/reservation/available-slots", params))

    # ========== Требуется авторизация ==========

    async def create(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/reservations", data)

    async def list(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/reservations", params)

    async def upcoming(self, limit: int = 10) -> list[Any]:
        response = await self._http.get_list(
            "/reservations", {"upcoming": True, "per_page": limit}
        )
        return response.data

    async def past(self, limit: int = 10) -> list[Any]:
        response = await self._http.get_list(
            "/reservations", {"past": True, "per_page": limit}
        )
        return response.data

    async def get(self, reservation_number: str) -> Any:
        return await self._http.get(f"/reservations/{reservation_number}")

    async def cancel(self, reservation_number: str, reason: str | None = None) -> Any:
        body = {"reason": reason} if reason is not None else {}
        return await self._http.post(f"/reservations/{reservation_number}/cancel", body)
