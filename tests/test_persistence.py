from decimal import Decimal

import pytest

from zest import persistence
from zest.models import Customer, InvalidStatusTransition, OrderStatus, Review
from zest.order import GroupOrder, Order, OrderItem


def _place(items, user_id=2) -> int:
    order = Order(user_id=user_id)
    for item, qty in items:
        order.add_order_item(OrderItem.snapshot(item, qty))
    order.total_amount = order.calculate_total()
    return persistence.save_order(order)


def test_seed_demo_catalog_only_once(db):
    assert persistence.seed_demo_catalog() == 7
    assert persistence.seed_demo_catalog() == 0
    names = [r.name for r in persistence.fetch_restaurants()]
    assert names == ["Burger King", "KFC", "Pizza Hut"]


def test_fetch_menu_items_returns_fresh_instances(db):
    persistence.seed_demo_catalog()
    bk = next(r for r in persistence.fetch_restaurants() if r.name == "Burger King")
    first = persistence.fetch_menu_items(bk.restaurant_id)
    second = persistence.fetch_menu_items(bk.restaurant_id)
    assert [i.name for i in first] == ["Chicken Royale", "Fries (Medium)", "Whopper"]
    assert first[0] is not second[0]
    assert first[0].line_key == second[0].line_key


def test_saved_order_keeps_purchase_prices(db):
    restaurant = persistence.add_restaurant("Burger King")
    whopper = persistence.add_menu_item(restaurant.restaurant_id, "Whopper", 85)
    order_id = _place([(whopper, 2)])
    assert order_id > 0

    assert persistence.update_menu_item_price(whopper.item_id, 999)
    assert persistence.fetch_menu_item(whopper.item_id).price == Decimal("999.00")

    lines = persistence.load_order_items(order_id)
    assert len(lines) == 1
    assert lines[0].name == "Whopper"
    assert lines[0].price_at_purchase == Decimal("85.00")
    assert lines[0].calculate_total() == 170


def test_history_is_newest_first_and_restored_without_items(db, whopper, fries):
    first = _place([(whopper, 1)])
    second = _place([(fries, 1)])
    _place([(fries, 1)], user_id=3)
    history = persistence.load_order_history(2)
    assert [o.order_id for o in history] == [second, first]
    assert all(o.items == [] for o in history)
    assert history[1].calculate_total() == 85


def test_save_order_failure_returns_sentinel(db, whopper, monkeypatch):
    order = Order(user_id=2)
    order.add_order_item(OrderItem.snapshot(whopper, 1))

    def broken_connect():
        raise persistence.sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(persistence, "_connect", broken_connect)
    assert persistence.save_order(order) == persistence.FAILED


def test_save_empty_order_is_a_programming_error(db):
    with pytest.raises(ValueError):
        persistence.save_order(Order(user_id=2))


def test_group_order_stores_share_link_and_contributors(db, whopper, fries):
    group = GroupOrder(user_id=2)
    group.add_to_group(Customer(2, "Ziad"), OrderItem.snapshot(whopper, 1))
    group.add_to_group(Customer(3, "Hamdy"), OrderItem.snapshot(fries, 1))
    group.total_amount = group.calculate_total()
    order_id = persistence.save_order(group)

    with persistence._connect() as conn:
        link = conn.execute("SELECT share_link FROM orders WHERE id = ?", (order_id,)).fetchone()[0]
        contributors = [
            row[0]
            for row in conn.execute(
                "SELECT customer_id FROM order_items WHERE order_id = ? ORDER BY line_index", (order_id,)
            )
        ]
    assert link == group.share_link
    assert contributors == [2, 3]


def test_update_order_status_walks_forward(db, whopper):
    order_id = _place([(whopper, 1)])
    assert persistence.update_order_status(order_id, OrderStatus.PREPARING)
    with pytest.raises(InvalidStatusTransition):
        persistence.update_order_status(order_id, OrderStatus.DELIVERED)
    assert persistence.load_order(order_id).status is OrderStatus.PREPARING
    assert persistence.update_order_status(9999, OrderStatus.PREPARING) is False


def test_reviews_only_after_delivery(db):
    customer = persistence.add_customer("Ziad", "Ziad@Gmail.com")
    assert persistence.find_customer_by_email("ziad@gmail.com") == customer
    restaurant = persistence.add_restaurant("KFC")
    bucket = persistence.add_menu_item(restaurant.restaurant_id, "Mighty Bucket", 200)
    order_id = _place([(bucket, 1)], user_id=customer.user_id)
    review = Review(restaurant_id=restaurant.restaurant_id, rating=5, comment="Great", author=customer)

    assert persistence.save_review(order_id, review) == persistence.FAILED

    for status in (OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.DELIVERED):
        persistence.update_order_status(order_id, status)
    assert persistence.save_review(order_id, review) > 0
    assert persistence.save_review(order_id, review) == persistence.FAILED

    reviews = persistence.reviews_for_restaurant(restaurant.restaurant_id)
    assert [(r.rating, r.author.name) for r in reviews] == [(5, "Ziad")]
    assert persistence.average_rating(restaurant.restaurant_id) == Decimal("5.0")
    assert persistence.average_rating(restaurant.restaurant_id + 1) is None


def test_review_rating_range():
    with pytest.raises(ValueError):
        Review(restaurant_id=1, rating=6, comment="", author=Customer(1, "Ziad"))


def test_loyalty_points_accumulate(db):
    customer = persistence.add_customer("Hamdy", "hamdy@gmail.com")
    assert persistence.award_loyalty_points(customer.user_id, 25) == 25
    assert persistence.award_loyalty_points(customer.user_id, 5) == 30
    assert persistence.award_loyalty_points(999, 5) == persistence.FAILED


def test_menu_item_availability(db):
    restaurant = persistence.add_restaurant("Pizza Hut")
    pizza = persistence.add_menu_item(restaurant.restaurant_id, "Pepperoni (M)", "130.00")
    assert persistence.set_menu_item_availability(pizza.item_id, False)
    assert persistence.fetch_menu_item(pizza.item_id).available is False
    assert persistence.set_menu_item_availability(9999, True) is False


def test_update_order_status_accepts_lowercase_text(db, whopper):
    order_id = _place([(whopper, 1)])
    assert persistence.update_order_status(order_id, "preparing")
    assert persistence.load_order(order_id).status is OrderStatus.PREPARING
