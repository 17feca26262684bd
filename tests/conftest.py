"""Pytest fixtures for the lesson shop: seeded catalog and a fake HTTP session."""

import json
from decimal import Decimal

import pytest
import requests

from lesson_shop.client import LessonServiceClient
from lesson_shop.config import ShopConfig
from lesson_shop.session import ShopSession
from lesson_shop.store import CatalogStore

BASE_URL = "http://shop.test"


class DummyResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text
        self.content = text.encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for requests.Session: canned responses per (method, path), calls recorded."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, method, path, *responses):
        self.routes.setdefault((method, path), []).extend(responses)

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append((method, path, json))
        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        resp = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(resp, Exception):
            raise resp
        return resp


@pytest.fixture
def http() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(http) -> LessonServiceClient:
    return LessonServiceClient(ShopConfig(base_url=BASE_URL), session=http)


@pytest.fixture
def catalog() -> CatalogStore:
    catalog = CatalogStore()

    catalog.add_lesson("1", "Math", price=Decimal("100.00"), available_inventory=2, location="Hendon")
    catalog.add_lesson("2", "Art", price=Decimal("80.00"), available_inventory=5, location="Colindale")
    catalog.add_lesson("3", "Chess", price=Decimal("50.00"), available_inventory=0, location="Brent Cross")  # Sold out

    return catalog


@pytest.fixture
def session(catalog) -> ShopSession:
    return ShopSession(catalog)


@pytest.fixture
def filled_session(session) -> ShopSession:
    c = session.customer
    c.first_name, c.last_name, c.address = "Ada", "Lovelace", "12 St James's Square"
    c.city, c.zip, c.state, c.type = "London", "12345", "Texas", "Club"
    return session


@pytest.fixture
def requests_error():
    return requests.ConnectionError("connection refused")
