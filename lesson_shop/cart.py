from __future__ import annotations

from typing import Dict, List

from lesson_shop.errors import OutOfStock
from lesson_shop.models import CartLine, Lesson


def can_reserve(lesson: Lesson) -> bool:
    # available_inventory уже уменьшен на всё, что корзина успела зарезервировать.
    return lesson.available_inventory > 0


class Cart:
    def __init__(self) -> None:
        self._lines: Dict[str, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def add_line(self, lesson: Lesson) -> CartLine:
        if not can_reserve(lesson):
            raise OutOfStock(lesson.id)

        line = self._lines.get(lesson.id)
        if line:
            line.quantity += 1
        else:
            line = self._lines[lesson.id] = CartLine(lesson=lesson, quantity=1)
        lesson.available_inventory -= 1
        return line

    def line_count_for(self, lesson_id: str) -> int:
        line = self._lines.get(lesson_id)
        return line.quantity if line else 0

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def clear(self) -> None:
        self._lines.clear()
