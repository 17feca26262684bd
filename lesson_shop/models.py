from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from lesson_shop.cart import Cart


@dataclass(slots=True)
class Lesson:
    id: str
    title: str
    description: str
    location: str
    price: Decimal
    available_inventory: int

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Lesson":
        # Сервис на MongoDB отдаёт "_id", старые записи могут иметь только "id".
        lesson_id = data.get("_id") or data.get("id")
        if lesson_id is None:
            raise ValueError(f"Lesson without id: {data!r}")
        price = Decimal(str(data.get("price", 0)))
        available = int(data.get("availableInventory", 0))
        if not price.is_finite() or price < 0 or available < 0:
            raise ValueError(f"Lesson {lesson_id} has invalid price/inventory: price={price} available={available}")
        return cls(
            id=str(lesson_id),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            location=str(data.get("location", "")),
            price=price,
            available_inventory=available,
        )


@dataclass(slots=True)
class CartLine:
    lesson: Lesson
    quantity: int = 1

    @property
    def lesson_id(self) -> str:
        return self.lesson.id


@dataclass(slots=True)
class CustomerDetails:
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    zip: str = ""
    state: str = ""
    type: str = ""

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if not getattr(self, f.name)]

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, "")

    def to_payload(self) -> Dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "city": self.city,
            "zip": self.zip,
            "state": self.state,
            "type": self.type,
        }


@dataclass(slots=True)
class Order:
    """
    Заказ собирается из корзины в момент отправки и после неё не хранится.
    """

    customer: CustomerDetails
    lines: Tuple[Tuple[str, int], ...]

    @classmethod
    def from_cart(cls, customer: CustomerDetails, cart: "Cart") -> "Order":
        return cls(customer=customer, lines=tuple((line.lesson_id, line.quantity) for line in cart.lines))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "lessons": [{"lessonId": lesson_id, "quantity": qty} for lesson_id, qty in self.lines],
            "customerDetails": self.customer.to_payload(),
        }
