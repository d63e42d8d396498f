from __future__ import annotations

import pytest

from zest import persistence
from zest.models import MenuItem, Restaurant
from zest.session import Session


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(persistence, "DB_PATH", str(tmp_path / "zest.db"))
    persistence.bootstrap_schema()
    return tmp_path / "zest.db"


@pytest.fixture
def burger_king() -> Restaurant:
    return Restaurant(restaurant_id=1, name="Burger King")


@pytest.fixture
def whopper() -> MenuItem:
    return MenuItem(item_id=1, restaurant_id=1, name="Whopper", price=85)


@pytest.fixture
def fries() -> MenuItem:
    return MenuItem(item_id=3, restaurant_id=1, name="Fries (Medium)", price=30)


@pytest.fixture
def pizza() -> MenuItem:
    return MenuItem(item_id=4, restaurant_id=2, name="Pepperoni (M)", price=130)


@pytest.fixture
def session(burger_king) -> Session:
    s = Session()
    s.login(2)
    s.select_restaurant(burger_king)
    return s
