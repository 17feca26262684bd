from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from lesson_shop.config import ShopConfig
from lesson_shop.errors import NetworkError, ServiceError, parse_error_message
from lesson_shop.models import Order

logger = logging.getLogger(__name__)

DEFAULT_ORDER_ERROR = "Failed to place the order."


class LessonServiceClient:
    """Thin wrapper over the lessons/orders collections of the backend."""

    def __init__(self, config: Optional[ShopConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ShopConfig()
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.config.base_url.rstrip('/')}{path}"

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = self._url(path)
        try:
            return self.session.request(
                method,
                url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise NetworkError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}

    def fetch_lessons(self) -> Any:
        resp = self._request("GET", "/collection/lessons")
        if not resp.ok:
            raise ServiceError(parse_error_message(resp.text, "Failed to load lessons."), resp.status_code)
        # Проверка "это массив" остаётся за каталогом.
        return self._json(resp)

    def create_order(self, order: Order) -> Dict[str, Any]:
        resp = self._request("POST", "/collection/orders", order.to_payload())
        if not resp.ok:
            raise ServiceError(parse_error_message(resp.text, DEFAULT_ORDER_ERROR), resp.status_code)
        data = self._json(resp)
        return data if isinstance(data, dict) else {}

    def update_inventory(self, lesson_id: str, available_inventory: int) -> Dict[str, Any]:
        resp = self._request(
            "PUT",
            f"/collection/lessons/{lesson_id}",
            {"availableInventory": available_inventory},
        )
        if not resp.ok:
            raise ServiceError(
                parse_error_message(resp.text, f"Failed to update inventory for lesson {lesson_id}."),
                resp.status_code,
            )
        data = self._json(resp)
        return data if isinstance(data, dict) else {}
