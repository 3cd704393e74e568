"""Исключения для работы с Diffsome API.

Все ошибки запросов сводятся к одному типу DiffsomeError с полями
(message, status, errors). Код статуса различает класс ошибки:

- 0 — транспортная или неизвестная ошибка (сеть, невалидный JSON);
- 408 — превышен таймаут запроса;
- любой другой — HTTP-статус ответа сервера.
"""


class DiffsomeError(Exception):
    """Базовое исключение для ошибок Diffsome API."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        errors: dict[str, list[str]] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors
        self.original_error = original_error

    @property
    def is_timeout(self) -> bool:
        """Ошибка вызвана превышением таймаута."""
        return self.status == 408

    @property
    def is_transport_error(self) -> bool:
        """Ошибка транспортного уровня (ответ сервера не получен или не разобран)."""
        return self.status == 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status={self.status}, errors={self.errors!r})"
        )


class DiffsomeConfigError(DiffsomeError):
    """Исключение при некорректной конфигурации клиента.

    Выбрасывается при:
    - Отсутствии API-ключа при создании клиента
    """
