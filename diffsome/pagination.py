"""Нормализация ответов списковых эндпоинтов.

Бэкенд отдаёт списки в разных формах: голый массив, объект
{data: [...]}, объект {data: [...], meta: {...}}, пагинатор с полями
на верхнем уровне или вовсе null. normalize_list_response приводит
любую из них к единому виду ListResponse.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

DEFAULT_CURRENT_PAGE = 1
DEFAULT_LAST_PAGE = 1
DEFAULT_PER_PAGE = 15


@dataclass
class PaginationMeta:
    """Метаданные пагинации.

    Attributes:
        current_page: Номер текущей страницы
        last_page: Номер последней страницы
        per_page: Размер страницы
        total: Общее количество элементов
        from_: Порядковый номер первого элемента страницы (None для пустого списка)
        to: Порядковый номер последнего элемента страницы (None для пустого списка)
    """

    current_page: int = DEFAULT_CURRENT_PAGE
    last_page: int = DEFAULT_LAST_PAGE
    per_page: int = DEFAULT_PER_PAGE
    total: int = 0
    from_: int | None = None
    to: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Представление в формате API (поле from без подчёркивания)."""
        data = asdict(self)
        data["from"] = data.pop("from_")
        return data


@dataclass
class ListResponse(Generic[T]):
    """Список элементов с метаданными пагинации.

    data всегда является списком, даже если сервер вернул null.
    """

    data: list[T] = field(default_factory=list)
    meta: PaginationMeta = field(default_factory=PaginationMeta)

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {"data": list(self.data), "meta": self.meta.to_dict()}


def _first_present(*candidates: Any) -> Any:
    """Первое значение, отличное от None (аналог цепочки `??`)."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def normalize_list_response(raw: Any) -> ListResponse[Any]:
    """Привести сырой ответ спискового эндпоинта к ListResponse.

    Функция тотальна: для любых входных данных возвращает результат
    и никогда не выбрасывает исключений.

    Args:
        raw: Распакованный ответ API

    Returns:
        ListResponse с гарантированно списковым data
    """
    if isinstance(raw, list):
        count = len(raw)
        return ListResponse(
            data=raw,
            meta=PaginationMeta(
                total=count,
                from_=1 if count > 0 else None,
                to=count if count > 0 else None,
            ),
        )

    if isinstance(raw, dict):
        data = raw.get("data")
        if not isinstance(data, list):
            data = []
        count = len(data)

        nested = raw.get("meta")
        if not isinstance(nested, dict):
            nested = {}

        def resolve(name: str, default: Any) -> Any:
            return _first_present(nested.get(name), raw.get(name), default)

        meta = PaginationMeta(
            current_page=resolve("current_page", DEFAULT_CURRENT_PAGE),
            last_page=resolve("last_page", DEFAULT_LAST_PAGE),
            per_page=resolve("per_page", DEFAULT_PER_PAGE),
            total=resolve("total", count),
            from_=resolve("from", 1 if count > 0 else None),
            to=resolve("to", count if count > 0 else None),
        )
        return ListResponse(data=data, meta=meta)

    # None и любые другие типы
    return ListResponse(data=[], meta=PaginationMeta())


def coerce_list(raw: Any) -> list[Any]:
    """Ответ-массив или объект {data: [...]} привести к списку.

    Для эндпоинтов, которые возвращают коллекцию без пагинации.
    """
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("data"), list):
        return raw["data"]
    return []
