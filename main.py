"""Пример использования Diffsome API клиента."""

import asyncio
import logging

from diffsome import Diffsome, DiffsomeError, get_diffsome_config

# Настраиваем логирование
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def on_auth_state_change(token: str | None, user: object) -> None:
    print(f"Состояние авторизации: {'вход' if token else 'выход'}, user={user!r}")


async def main() -> None:
    """Основная функция."""
    # Загружаем конфигурацию из config.yml
    config = get_diffsome_config().model_copy(
        update={"on_auth_state_change": on_auth_state_change}
    )
    print(f"Подключение к серверу: {config.base_url} (tenant: {config.tenant_id})")

    async with Diffsome.from_config(config) as client:
        # Доски
        boards = await client.boards.list()
        print(f"\nДоски ({len(boards)} шт.):")
        for board in boards.data[:5]:  # Показываем первые 5
            print(f"  - {board.get('name')} (id: {board.get('id')})")

        # Блог
        posts = await client.blog.list({"per_page": 3})
        print(f"\nПосты блога: {len(posts)} из {posts.meta.total}")

        # Товары
        try:
            products = await client.shop.list_products({"per_page": 3})
            print(f"\nТовары: {len(products)} из {products.meta.total}")
        except DiffsomeError as exc:
            print(f"\nОшибка получения товаров: {exc} (status={exc.status})")

    print("\nСоединения закрыты.")


if __name__ == "__main__":
    asyncio.run(main())
