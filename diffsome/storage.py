"""Хранилища ключ-значение для сохранения состояния сессии.

Два взаимозаменяемых бэкенда с одинаковым контрактом get/set/remove:

- FileStorage — долговременное хранилище в JSON-файле, переживает
  перезапуск процесса;
- MemoryStorage — хранилище на время жизни процесса.

CredentialStore оборачивает бэкенд и гарантирует, что операции
никогда не выбрасывают исключений: при недоступном или сбоящем
бэкенде клиент продолжает работать только с состоянием в памяти.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

StorageType = Literal["local", "session"]

DEFAULT_STORAGE_DIR = Path.home() / ".diffsome"
STORAGE_FILE_NAME = "storage.json"


@runtime_checkable
class KeyValueStorage(Protocol):
    """Контракт бэкенда хранилища."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Хранилище в памяти процесса."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileStorage:
    """Долговременное хранилище в JSON-файле.

    Файл читается при каждом обращении, поэтому несколько клиентов
    (и несколько процессов) видят изменения друг друга. Запись атомарная:
    через временный файл и os.replace.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as file:
            data = json.load(file)
        if not isinstance(data, dict):
            raise ValueError(f"Файл хранилища {self._path} должен содержать объект")
        return data

    def _dump(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=".storage-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(data, file)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


# Общее хранилище уровня процесса для storage_type="session"
session_storage = MemoryStorage()


def resolve_storage(
    storage_type: StorageType = "local",
    storage_dir: Path | str | None = None,
) -> KeyValueStorage:
    """Выбрать бэкенд по типу хранилища.

    Args:
        storage_type: "local" — файл на диске, "session" — память процесса
        storage_dir: Каталог для файлового хранилища

    Returns:
        Экземпляр бэкенда
    """
    if storage_type == "session":
        return session_storage
    directory = Path(storage_dir) if storage_dir is not None else DEFAULT_STORAGE_DIR
    return FileStorage(directory / STORAGE_FILE_NAME)


class CredentialStore:
    """Адаптер над бэкендом хранилища, который никогда не падает.

    Без бэкенда чтение возвращает None, а запись пропускается.
    Ошибки бэкенда логируются и поглощаются.
    """

    def __init__(self, backend: KeyValueStorage | None) -> None:
        self._backend = backend

    @property
    def available(self) -> bool:
        return self._backend is not None

    def read(self, key: str) -> str | None:
        if self._backend is None:
            return None
        try:
            return self._backend.get_item(key)
        except Exception as exc:
            logger.warning("Не удалось прочитать ключ %s из хранилища: %s", key, exc)
            return None

    def write(self, key: str, value: str) -> None:
        if self._backend is None:
            return
        try:
            self._backend.set_item(key, value)
        except Exception as exc:
            logger.warning("Не удалось записать ключ %s в хранилище: %s", key, exc)

    def remove(self, key: str) -> None:
        if self._backend is None:
            return
        try:
            self._backend.remove_item(key)
        except Exception as exc:
            logger.warning("Не удалось удалить ключ %s из хранилища: %s", key, exc)
