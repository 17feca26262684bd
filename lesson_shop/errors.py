from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ShopError(Exception):
    pass


class ValidationError(ShopError):
    pass


class OutOfStock(ShopError):
    def __init__(self, lesson_id: str):
        super().__init__("Cannot add more items to the cart. Out of stock!")
        self.lesson_id = lesson_id


class NetworkError(ShopError):
    pass


class FormatError(ShopError):
    pass


class ErrorKind(Enum):
    STRUCTURED = "structured"
    RAW_TEXT = "raw_text"
    DEFAULT = "default"


@dataclass(slots=True, frozen=True)
class ErrorMessage:
    """
    Сообщение об ошибке из тела ответа сервиса.

    kind показывает, откуда взят текст:
    - STRUCTURED: поле "message" из JSON
    - RAW_TEXT: тело ответа как есть (не JSON)
    - DEFAULT: запасной текст, тело ничего полезного не содержит
    """

    kind: ErrorKind
    text: str


def parse_error_message(body: Optional[str], default: str) -> ErrorMessage:
    try:
        data = json.loads(body or "")
    except ValueError:
        if body:
            return ErrorMessage(ErrorKind.RAW_TEXT, body)
        return ErrorMessage(ErrorKind.DEFAULT, default)

    message = data.get("message") if isinstance(data, dict) else None
    if message:
        return ErrorMessage(ErrorKind.STRUCTURED, str(message))
    return ErrorMessage(ErrorKind.DEFAULT, default)


class ServiceError(ShopError):
    def __init__(self, error: ErrorMessage, status_code: int):
        super().__init__(error.text)
        self.error = error
        self.status_code = status_code
