from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Tuple

from lesson_shop.errors import FormatError
from lesson_shop.models import Lesson

logger = logging.getLogger(__name__)

SORT_OPTIONS: Dict[str, Tuple[Callable[[Lesson], Any], bool]] = {
    "title": (lambda l: l.title.lower(), False),
    "title_desc": (lambda l: l.title.lower(), True),
    "price": (lambda l: l.price, False),
    "price_desc": (lambda l: l.price, True),
    "location": (lambda l: l.location.lower(), False),
    "availability": (lambda l: l.available_inventory, False),
}


class CatalogStore:
    """
    Каталог уроков в памяти.

    Из сервиса приходит только список уроков; локально меняется лишь
    available_inventory (оптимистичный резерв из корзины).
    """

    def __init__(self) -> None:
        self.lessons: Dict[str, Lesson] = {}

    def __len__(self) -> int:
        return len(self.lessons)

    def get(self, lesson_id: str) -> Lesson:
        lesson = self.lessons.get(lesson_id)
        if not lesson:
            raise KeyError(f"Lesson {lesson_id} not found")
        return lesson

    def load(self, payload: Any) -> List[Lesson]:
        if not isinstance(payload, list):
            logger.error("Fetched data is not an array: %r", payload)
            raise FormatError("Unexpected data format received. Please try again later.")
        try:
            lessons = [Lesson.from_payload(item) for item in payload]
        except (AttributeError, TypeError, ValueError, ArithmeticError) as e:
            logger.error("Malformed lesson in catalog: %s", e)
            raise FormatError("Unexpected data format received. Please try again later.") from e
        self.replace(lessons)
        return lessons

    def replace(self, lessons: Iterable[Lesson]) -> None:
        self.lessons = {lesson.id: lesson for lesson in lessons}

    def browse(self, query: str = "", sort: str = "title") -> List[Lesson]:
        lessons: List[Lesson] = list(self.lessons.values())
        if sort in SORT_OPTIONS:
            key, reverse = SORT_OPTIONS[sort]
            lessons.sort(key=key, reverse=reverse)

        if not query:
            return lessons
        q = query.lower()
        return [
            l for l in lessons
            if q in l.title.lower() or q in l.description.lower() or q in l.location.lower()
        ]

    # Seed helper (удобно для тестов/демо)
    def add_lesson(
        self,
        lesson_id: str,
        title: str,
        price: Decimal,
        available_inventory: int,
        location: str = "",
        description: str = "",
    ) -> Lesson:
        lesson = Lesson(
            id=lesson_id,
            title=title,
            description=description,
            location=location,
            price=price,
            available_inventory=available_inventory,
        )
        self.lessons[lesson_id] = lesson
        return lesson
