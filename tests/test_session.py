import pytest

from zest.models import Restaurant
from zest.session import Session


def test_selecting_restaurant_starts_fresh_cart(session, whopper):
    session.cart.add(whopper)
    session.select_restaurant(Restaurant(restaurant_id=2, name="Pizza Hut"))
    assert session.cart.is_empty
    assert session.restaurant.restaurant_id == 2


def test_reselecting_same_restaurant_clears_cart(session, burger_king, whopper):
    session.cart.add(whopper)
    session.select_restaurant(burger_king)
    assert session.cart.is_empty
    assert session.restaurant == burger_king


def test_logout_clears_state(session, whopper):
    session.cart.add(whopper)
    session.logout()
    assert session.current_user_id() is None
    assert session.cart.is_empty
    assert session.restaurant is None


def test_sessions_do_not_share_carts(whopper):
    first, second = Session(), Session()
    first.cart.add(whopper)
    assert second.cart.is_empty


def test_login_requires_positive_id():
    with pytest.raises(ValueError):
        Session().login(0)
