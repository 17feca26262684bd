"""Tests for catalog loading, browsing, session state and config."""
import logging
from decimal import Decimal

import pytest

from lesson_shop.config import DEFAULT_BASE_URL, ShopConfig
from lesson_shop.errors import FormatError, NetworkError, OutOfStock
from lesson_shop.models import Lesson
from lesson_shop.session import ShopSession, View

from conftest import DummyResponse


def test_lesson_from_payload_prefers_mongo_id():
    lesson = Lesson.from_payload(
        {"_id": "abc", "id": 1, "title": "Math", "price": 9.5, "availableInventory": 4, "location": "Hendon"}
    )
    assert lesson.id == "abc"
    assert lesson.price == Decimal("9.5")
    assert lesson.available_inventory == 4


def test_load_catalog(client, http):
    http.route("GET", "/collection/lessons", DummyResponse([
        {"_id": "1", "title": "Math", "description": "", "location": "Hendon", "price": 100, "availableInventory": 5},
        {"_id": "2", "title": "Art", "description": "", "location": "Brent", "price": 80, "availableInventory": 0},
    ]))
    session = ShopSession()

    session.load_catalog(client)

    assert len(session.catalog) == 2
    assert session.catalog.get("1").title == "Math"
    assert any("lessons fetched: 2" in l for l in session.logs)


def test_load_catalog_rejects_non_array(client, http):
    http.route("GET", "/collection/lessons", DummyResponse({"lessons": []}))
    session = ShopSession()

    with pytest.raises(FormatError):
        session.load_catalog(client)

    assert len(session.catalog) == 0
    assert session.notifications[-1].message == "Unexpected data format received. Please try again later."
    assert session.notifications[-1].level == logging.ERROR


@pytest.mark.parametrize("item", [
    {"title": "no id", "price": 10, "availableInventory": 1},
    {"_id": "1", "title": "Math", "price": "ten", "availableInventory": 1},
    {"_id": "1", "title": "Math", "price": 10, "availableInventory": "many"},
    {"_id": "1", "title": "Math", "price": 10, "availableInventory": -3},
    {"_id": "1", "title": "Math", "price": -1, "availableInventory": 1},
    "Math",
])
def test_load_catalog_rejects_malformed_lesson(client, http, item):
    """Test a bad catalog entry is surfaced as a format error and nothing is loaded."""
    http.route("GET", "/collection/lessons", DummyResponse([
        {"_id": "2", "title": "Art", "price": 80, "availableInventory": 5},
        item,
    ]))
    session = ShopSession()

    with pytest.raises(FormatError):
        session.load_catalog(client)

    assert len(session.catalog) == 0
    assert session.notifications[-1].message == "Unexpected data format received. Please try again later."
    assert session.notifications[-1].level == logging.ERROR


def test_load_catalog_network_failure(client, http, requests_error):
    http.route("GET", "/collection/lessons", requests_error)
    session = ShopSession()

    with pytest.raises(NetworkError):
        session.load_catalog(client)

    assert session.notifications[-1].message == "Failed to load lessons. Please try again later."


def test_browse_sorts_and_searches(catalog):
    assert [l.title for l in catalog.browse()] == ["Art", "Chess", "Math"]
    assert [l.title for l in catalog.browse(sort="price_desc")] == ["Math", "Art", "Chess"]
    assert [l.title for l in catalog.browse(sort="availability")] == ["Chess", "Math", "Art"]
    assert [l.title for l in catalog.browse("hEnDoN")] == ["Math"]
    assert catalog.browse("nothing like this") == []


def test_add_to_cart_out_of_stock_notifies(session):
    with pytest.raises(OutOfStock):
        session.add_to_cart("3")

    assert session.cart.is_empty()
    assert session.notifications[-1].message == "Cannot add more items to the cart. Out of stock!"
    assert session.notifications[-1].level == logging.WARNING


def test_toggle_checkout(session):
    assert session.view is View.CATALOG
    assert session.toggle_checkout() is View.CHECKOUT
    assert session.toggle_checkout() is View.CATALOG


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("LESSON_SHOP_API_URL", "http://api.example/")
    monkeypatch.setenv("LESSON_SHOP_TIMEOUT", "2.5")

    config = ShopConfig.from_env()

    assert config.base_url == "http://api.example"
    assert config.timeout == 2.5


def test_config_defaults():
    config = ShopConfig.from_env({})
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout is None
