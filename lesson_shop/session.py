from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

from lesson_shop.cart import Cart
from lesson_shop.errors import NetworkError, OutOfStock, ShopError
from lesson_shop.models import CartLine, CustomerDetails
from lesson_shop.store import CatalogStore

logger = logging.getLogger(__name__)


class View(Enum):
    CATALOG = "catalog"
    CHECKOUT = "checkout"


@dataclass(slots=True, frozen=True)
class Notification:
    level: int
    message: str


class ShopSession:
    """
    Состояние одной пользовательской сессии: каталог, корзина, форма покупателя,
    текущий экран.

    Меняется только через методы ниже и через CheckoutCoordinator.
    Логи копятся в памяти (для демонстрации и тестов), уведомления — то,
    что пользователь увидел бы во всплывающем окне.
    """

    def __init__(self, catalog: CatalogStore | None = None) -> None:
        self.catalog = catalog or CatalogStore()
        self.cart = Cart()
        self.customer = CustomerDetails()
        self.view = View.CATALOG

        self.logs: List[str] = []
        self.notifications: List[Notification] = []

    def log(self, message: str) -> None:
        self.logs.append(message)
        logger.info(message)

    def notify(self, message: str, level: int = logging.INFO) -> None:
        self.notifications.append(Notification(level=level, message=message))
        logger.log(level, message)

    def toggle_checkout(self) -> View:
        self.view = View.CHECKOUT if self.view is View.CATALOG else View.CATALOG
        return self.view

    def load_catalog(self, client) -> None:
        self.log("Requesting lessons from server...")
        try:
            self.catalog.load(client.fetch_lessons())
        except NetworkError:
            self.notify("Failed to load lessons. Please try again later.", logging.ERROR)
            raise
        except ShopError as e:
            self.notify(str(e), logging.ERROR)
            raise
        self.log(f"lessons fetched: {len(self.catalog)}")

    def add_to_cart(self, lesson_id: str) -> CartLine:
        lesson = self.catalog.get(lesson_id)
        try:
            line = self.cart.add_line(lesson)
        except OutOfStock as e:
            self.notify(str(e), logging.WARNING)
            raise
        self.log(f"cart: +1 {lesson.id} qty={line.quantity} (available={lesson.available_inventory})")
        return line
