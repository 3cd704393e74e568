"""Магазин: товары, корзина, заказы, оплаты и подписки.

Методы корзины сохраняют session_id из ответа сервера в сессии
клиента, чтобы гостевая корзина переживала перезапуск процесса.
"""

import logging
from typing import Any, Literal

from diffsome.http_client import HttpClient
from diffsome.pagination import ListResponse

logger = logging.getLogger(__name__)

ProductType = Literal["physical", "digital", "subscription", "bundle"]


class ShopResource:
    """Фасад магазина."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    # ========== Товары ==========

    async def list_products(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/products", params)

    async def get_product(self, id_or_slug: int | str) -> Any:
        return await self._http.get(f"/products/{id_or_slug}")

    async def featured_products(self, limit: int = 8) -> list[Any]:
        """Избранные товары (всегда список)."""
        response = await self._http.get_list(
            "/products", {"per_page": limit, "is_featured": True}
        )
        return response.data

    async def search_products(
        self, query: str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list("/products", {**(params or {}), "search": query})

    async def list_products_by_type(
        self, product_type: ProductType, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list(
            "/products", {**(params or {}), "type": product_type}
        )

    async def get_digital_products(
        self, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self.list_products_by_type("digital", params)

    async def get_subscription_products(
        self, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self.list_products_by_type("subscription", params)

    async def get_bundle_products(
        self, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self.list_products_by_type("bundle", params)

    async def get_bundle_items(self, product_slug: str) -> Any:
        """Состав набора и расчёт его цены."""
        result = await self._http.get(f"/products/{product_slug}/bundle-items")
        return result["bundle"]

    # ========== Категории ==========

    async def list_categories(self) -> ListResponse[Any]:
        return await self._http.get_list("/categories")

    async def get_category(self, id_or_slug: int | str) -> Any:
        return await self._http.get(f"/categories/{id_or_slug}")

    async def category_products(
        self, category_id_or_slug: int | str, params: dict[str, Any] | None = None
    ) -> ListResponse[Any]:
        return await self._http.get_list(
            f"/categories/{category_id_or_slug}/products", params
        )

    # ========== Корзина ==========

    def _save_cart_session(self, cart: Any) -> Any:
        """Запомнить session_id гостевой корзины из ответа."""
        if isinstance(cart, dict) and cart.get("session_id"):
            self._http.set_cart_session_id(cart["session_id"])
        return cart

    async def get_cart(self) -> Any:
        cart = await self._http.get("/cart")
        return self._save_cart_session(cart)

    async def add_to_cart(self, data: dict[str, Any]) -> Any:
        """Добавить товар в корзину.

        Args:
            data: {"product_id": ..., "quantity": ..., "variant_id": ...}

        Returns:
            Обновлённая корзина
        """
        cart = await self._http.post("/cart/items", data)
        return self._save_cart_session(cart)

    async def update_cart_item(self, item_id: int, data: dict[str, Any]) -> Any:
        cart = await self._http.put(f"/cart/items/{item_id}", data)
        return self._save_cart_session(cart)

    async def remove_from_cart(self, item_id: int) -> Any:
        cart = await self._http.delete(f"/cart/items/{item_id}")
        return self._save_cart_session(cart)

    async def clear_cart(self) -> None:
        """Очистить корзину и забыть гостевую сессию."""
        await self._http.delete("/cart")
        self._http.set_cart_session_id(None)
        logger.debug("Корзина очищена")

    # ========== Заказы ==========

    async def list_orders(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/orders", params)

    async def get_order(self, id_or_number: int | str) -> Any:
        return await self._http.get(f"/orders/{id_or_number}")

    async def create_order(self, data: dict[str, Any]) -> Any:
        """Оформить заказ из корзины."""
        return await self._http.post("/orders", data)

    async def cancel_order(self, order_id: int) -> Any:
        return await self._http.post(f"/orders/{order_id}/cancel")

    # ========== Оплаты ==========

    async def get_payment(self, order_id: int) -> Any:
        return await self._http.get(f"/orders/{order_id}/payment")

    async def get_payment_status(self) -> Any:
        """Доступные способы оплаты."""
        return await self._http.get("/payments/status")

    async def toss_payment_ready(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/payments/toss/ready", data)

    async def toss_payment_confirm(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/payments/toss/confirm", data)

    async def toss_payment_cancel(
        self,
        order_number: str,
        cancel_reason: str,
        cancel_amount: int | None = None,
    ) -> None:
        body: dict[str, Any] = {
            "order_number": order_number,
            "cancel_reason": cancel_reason,
        }
        if cancel_amount is not None:
            body["cancel_amount"] = cancel_amount
        await self._http.post("/payments/toss/cancel", body)

    async def stripe_checkout(self, data: dict[str, Any]) -> Any:
        """Создать Stripe Checkout Session."""
        return await self._http.post("/payments/stripe/checkout", data)

    async def stripe_verify(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/payments/stripe/verify", data)

    async def stripe_refund(
        self, order_number: str, reason: str | None = None, amount: int | None = None
    ) -> None:
        await self._http.post(
            "/payments/stripe/refund",
            {"order_number": order_number, "reason": reason, "amount": amount},
        )

    # ========== Купоны ==========

    async def validate_coupon(self, code: str, order_amount: int) -> Any:
        return await self._http.post(
            "/coupons/validate", {"code": code, "order_amount": order_amount}
        )

    async def my_coupons(self) -> list[Any]:
        response = await self._http.get_list("/coupons")
        return response.data

    # ========== Отзывы ==========

    async def get_product_reviews(
        self, product_slug: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Отзывы о товаре вместе со статистикой оценок."""
        return await self._http.get(f"/products/{product_slug}/reviews", params)

    async def can_review_product(self, product_slug: str) -> Any:
        """Может ли текущий участник оставить отзыв (купил и ещё не отзывался)."""
        return await self._http.get(f"/products/{product_slug}/reviews/can-review")

    async def create_review(self, product_slug: str, data: dict[str, Any]) -> Any:
        return await self._http.post(f"/products/{product_slug}/reviews", data)

    async def update_review(self, review_id: int, data: dict[str, Any]) -> Any:
        return await self._http.put(f"/reviews/{review_id}", data)

    async def delete_review(self, review_id: int) -> None:
        await self._http.delete(f"/reviews/{review_id}")

    async def mark_review_helpful(self, review_id: int) -> Any:
        return await self._http.post(f"/reviews/{review_id}/helpful")

    async def my_reviews(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/my/reviews", params)

    # ========== Избранное ==========

    async def get_wishlist(self, params: dict[str, Any] | None = None) -> ListResponse[Any]:
        return await self._http.get_list("/wishlist", params)

    async def add_to_wishlist(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/wishlist", data)

    async def remove_from_wishlist(self, wishlist_id: int) -> None:
        await self._http.delete(f"/wishlist/{wishlist_id}")

    async def toggle_wishlist(self, product_id: int, variant_id: int | None = None) -> Any:
        """Добавить товар в избранное или убрать, если он уже там."""
        return await self._http.post(
            "/wishlist/toggle", {"product_id": product_id, "variant_id": variant_id}
        )

    async def is_in_wishlist(self, product_id: int, variant_id: int | None = None) -> bool:
        result = await self._http.get(
            "/wishlist/check", {"product_id": product_id, "variant_id": variant_id}
        )
        return bool(result["in_wishlist"])

    async def check_wishlist_bulk(self, product_ids: list[int]) -> dict[str, bool]:
        result = await self._http.post(
            "/wishlist/check-bulk", {"product_ids": product_ids}
        )
        return result["items"]

    async def get_wishlist_count(self) -> int:
        result = await self._http.get("/wishlist/count")
        return result["count"]

    async def move_wishlist_to_cart(self, wishlist_ids: list[int] | None = None) -> Any:
        """Перенести товары из избранного в корзину (все, если ids не заданы)."""
        return await self._http.post(
            "/wishlist/move-to-cart", {"wishlist_ids": wishlist_ids}
        )

    async def update_wishlist_note(self, wishlist_id: int, note: str) -> Any:
        return await self._http.put(f"/wishlist/{wishlist_id}", {"note": note})

    async def get_product_wishlist_count(self, product_slug: str) -> int:
        result = await self._http.get(f"/products/{product_slug}/wishlist-count")
        return result["count"]

    # ========== Цифровые товары ==========

    async def get_my_downloads(self) -> list[Any]:
        result = await self._http.get("/my/downloads")
        return result["downloads"]

    async def get_order_downloads(self, order_number: str) -> list[Any]:
        result = await self._http.get(f"/orders/{order_number}/downloads")
        return result["downloads"]

    def get_download_url(self, download_token: str) -> str:
        return self._http.get_download_url(download_token)

    async def get_download_info(self, download_token: str) -> Any:
        result = await self._http.get(f"/downloads/{download_token}/info")
        return result["download"]

    # ========== Подписки ==========

    async def get_subscriptions(self) -> list[Any]:
        result = await self._http.get("/subscriptions")
        return result["subscriptions"]

    async def get_subscription(self, subscription_id: int) -> Any:
        result = await self._http.get(f"/subscriptions/{subscription_id}")
        return result["subscription"]

    async def create_subscription(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/subscriptions", data)

    async def cancel_subscription(
        self, subscription_id: int, immediately: bool = False
    ) -> Any:
        """Отменить подписку.

        Args:
            subscription_id: ID подписки
            immediately: Отменить сразу, а не в конце оплаченного периода
        """
        result = await self._http.post(
            f"/subscriptions/{subscription_id}/cancel", {"immediately": immediately}
        )
        return result["subscription"]

    async def pause_subscription(self, subscription_id: int) -> Any:
        result = await self._http.post(f"/subscriptions/{subscription_id}/pause")
        return result["subscription"]

    async def resume_subscription(self, subscription_id: int) -> Any:
        result = await self._http.post(f"/subscriptions/{subscription_id}/resume")
        return result["subscription"]

    async def create_setup_intent(self) -> Any:
        return await self._http.post("/subscriptions/setup-intent")

    async def create_subscription_checkout(self, data: dict[str, Any]) -> Any:
        return await self._http.post("/subscriptions/checkout", data)

    async def verify_subscription_checkout(self, session_id: str) -> Any:
        return await self._http.post("/subscriptions/verify", {"session_id": session_id})
