"""SQLite persistence for catalog, orders, customers and reviews."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from zest.config import DB_PATH, DEFAULT_ITEM_IMAGE, DEFAULT_RESTAURANT_IMAGE
from zest.data import DEMO_MENU, DEMO_RESTAURANTS
from zest.models import Customer, MenuItem, OrderStatus, Restaurant, Review
from zest.order import GroupOrder, Order, OrderItem
from zest.pricing import Number, as_decimal, quantize

log = logging.getLogger(__name__)

FAILED = -1


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect() -> sqlite3.Connection:
    db_file = Path(DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema() -> None:
    """Create persistence schema if it does not already exist."""
    with _connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                loyalty_points INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS restaurants (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                image_url TEXT NOT NULL DEFAULT 'default_rest.png'
            );

            CREATE TABLE IF NOT EXISTS menu_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                restaurant_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                current_price TEXT NOT NULL,
                is_available INTEGER NOT NULL DEFAULT 1,
                description TEXT NOT NULL DEFAULT '',
                image_url TEXT NOT NULL DEFAULT 'default_item.png',
                FOREIGN KEY(restaurant_id) REFERENCES restaurants(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS orders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                restaurant_id INTEGER,
                total_amount TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'PENDING'
                    CHECK(status IN ('PENDING', 'PREPARING', 'READY', 'DELIVERED')),
                created_at TEXT NOT NULL,
                share_link TEXT
            );

            CREATE TABLE IF NOT EXISTS order_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL,
                line_index INTEGER NOT NULL,
                menu_item_id INTEGER,
                menu_item_name TEXT NOT NULL,
                price_at_purchase TEXT NOT NULL,
                quantity INTEGER NOT NULL CHECK(quantity > 0),
                customer_id INTEGER,
                FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS reviews (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL UNIQUE,
                restaurant_id INTEGER NOT NULL,
                customer_id INTEGER NOT NULL,
                rating INTEGER NOT NULL CHECK(rating >= 1 AND rating <= 5),
                comment TEXT NOT NULL DEFAULT '',
                review_date TEXT NOT NULL,
                FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE,
                FOREIGN KEY(customer_id) REFERENCES users(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_menu_items_restaurant
                ON menu_items(restaurant_id);

            CREATE INDEX IF NOT EXISTS idx_orders_user
                ON orders(user_id, created_at);

            CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                ON order_items(order_id, line_index);
            """
        )


def seed_demo_catalog() -> int:
    """Insert the demo restaurants and menus into an empty catalog. Returns dishes added."""
    added = 0
    with _connect() as conn:
        with conn:
            if conn.execute("SELECT COUNT(*) FROM restaurants").fetchone()[0]:
                return 0
            for name, image_url in DEMO_RESTAURANTS.items():
                cur = conn.execute("INSERT INTO restaurants (name, image_url) VALUES (?, ?)", (name, image_url))
                restaurant_id = int(cur.lastrowid)
                for dish in DEMO_MENU.get(name, []):
                    conn.execute(
                        """
                        INSERT INTO menu_items (restaurant_id, name, current_price, description)
                        VALUES (?, ?, ?, ?)
                        """,
                        (restaurant_id, dish.name, str(quantize(dish.price)), dish.description),
                    )
                    added += 1
    log.info("Seeded demo catalog with %d dishes", added)
    return added


# Catalog


def _menu_item_from_row(row: sqlite3.Row) -> MenuItem:
    return MenuItem(
        item_id=row["id"],
        restaurant_id=row["restaurant_id"],
        name=row["name"],
        price=Decimal(row["current_price"]),
        available=bool(row["is_available"]),
        description=row["description"] or "",
        image_url=row["image_url"] or DEFAULT_ITEM_IMAGE,
    )


def add_restaurant(name: str, image_url: str = DEFAULT_RESTAURANT_IMAGE) -> Restaurant:
    if not name.strip():
        raise ValueError("restaurant name must not be empty")
    with _connect() as conn:
        with conn:
            cur = conn.execute("INSERT INTO restaurants (name, image_url) VALUES (?, ?)", (name.strip(), image_url))
    return Restaurant(restaurant_id=int(cur.lastrowid), name=name.strip(), image_url=image_url)


def add_menu_item(
    restaurant_id: int,
    name: str,
    price: Number,
    description: str = "",
    image_url: str = DEFAULT_ITEM_IMAGE,
) -> MenuItem:
    amount = quantize(price)
    if amount < 0:
        raise ValueError("price must not be negative")
    with _connect() as conn:
        with conn:
            cur = conn.execute(
                """
                INSERT INTO menu_items (restaurant_id, name, current_price, description, image_url)
                VALUES (?, ?, ?, ?, ?)
                """,
                (restaurant_id, name, str(amount), description, image_url),
            )
    return MenuItem(
        item_id=int(cur.lastrowid),
        restaurant_id=restaurant_id,
        name=name,
        price=amount,
        description=description,
        image_url=image_url,
    )


def fetch_restaurants() -> list[Restaurant]:
    with _connect() as conn:
        rows = conn.execute("SELECT id, name, image_url FROM restaurants ORDER BY name").fetchall()
    return [
        Restaurant(restaurant_id=row["id"], name=row["name"], image_url=row["image_url"] or DEFAULT_RESTAURANT_IMAGE)
        for row in rows
    ]


def fetch_menu_items(restaurant_id: int) -> list[MenuItem]:
    """Fresh instances of a restaurant's menu, with live prices."""
    with _connect() as conn:
        rows = conn.execute(
            "SELECT * FROM menu_items WHERE restaurant_id = ? ORDER BY name",
            (restaurant_id,),
        ).fetchall()
    return [_menu_item_from_row(row) for row in rows]


def fetch_menu_item(item_id: int) -> MenuItem | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM menu_items WHERE id = ?", (item_id,)).fetchone()
    return _menu_item_from_row(row) if row else None


def update_menu_item_price(item_id: int, price: Number) -> bool:
    """Merchant price change. Already placed orders keep their purchase prices."""
    amount = quantize(price)
    if amount < 0:
        raise ValueError("price must not be negative")
    with _connect() as conn:
        with conn:
            cur = conn.execute("UPDATE menu_items SET current_price = ? WHERE id = ?", (str(amount), item_id))
    return cur.rowcount > 0


def set_menu_item_availability(item_id: int, available: bool) -> bool:
    with _connect() as conn:
        with conn:
            cur = conn.execute("UPDATE menu_items SET is_available = ? WHERE id = ?", (int(available), item_id))
    return cur.rowcount > 0


# Customers


def add_customer(name: str, email: str) -> Customer:
    if not name.strip() or not email.strip():
        raise ValueError("name and email must not be empty")
    with _connect() as conn:
        with conn:
            cur = conn.execute("INSERT INTO users (name, email) VALUES (?, ?)", (name.strip(), email.strip().lower()))
    return Customer(user_id=int(cur.lastrowid), name=name.strip(), email=email.strip().lower())


def find_customer_by_email(email: str) -> Customer | None:
    with _connect() as conn:
        row = conn.execute(
            "SELECT id, name, email FROM users WHERE email = ?",
            (email.strip().lower(),),
        ).fetchone()
    return Customer(user_id=row["id"], name=row["name"], email=row["email"]) if row else None


def award_loyalty_points(user_id: int, points: int) -> int:
    """Add points to a customer and return the new balance (``FAILED`` if unknown)."""
    if points < 0:
        raise ValueError("points must not be negative")
    with _connect() as conn:
        with conn:
            conn.execute("UPDATE users SET loyalty_points = loyalty_points + ? WHERE id = ?", (points, user_id))
            row = conn.execute("SELECT loyalty_points FROM users WHERE id = ?", (user_id,)).fetchone()
    return int(row["loyalty_points"]) if row else FAILED


# Orders


def save_order(order: Order) -> int:
    """
    Persist an order with its frozen line prices.

    Returns the new order id, or ``FAILED`` when the database rejects the
    write; nothing is stored in that case.
    """
    if not order.items:
        raise ValueError("Cannot save an order without items")

    customer_by_line: dict[int, int] = {}
    share_link = None
    if isinstance(order, GroupOrder):
        share_link = order.share_link
        for customer, items in order.participant_splits.items():
            for item in items:
                customer_by_line[id(item)] = customer.user_id

    try:
        with _connect() as conn:
            with conn:
                cur = conn.execute(
                    """
                    INSERT INTO orders (user_id, restaurant_id, total_amount, status, created_at, share_link)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order.user_id,
                        order.items[0].item.restaurant_id,
                        str(quantize(order.total_amount)),
                        order.status.value,
                        order.created_at.isoformat(),
                        share_link,
                    ),
                )
                order_id = int(cur.lastrowid)

                for idx, line in enumerate(order.items):
                    conn.execute(
                        """
                        INSERT INTO order_items (
                            order_id, line_index, menu_item_id, menu_item_name,
                            price_at_purchase, quantity, customer_id
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            order_id,
                            idx,
                            line.item.item_id,
                            line.name or "Unknown Item",
                            str(line.price_at_purchase),
                            line.quantity,
                            customer_by_line.get(id(line)),
                        ),
                    )
    except sqlite3.Error:
        log.exception("Error saving order for user %s", order.user_id)
        return FAILED

    log.info("Order saved with id %s", order_id)
    return order_id


def _order_from_row(row: sqlite3.Row) -> Order:
    return Order.restore(
        order_id=row["id"],
        user_id=row["user_id"],
        total_amount=Decimal(row["total_amount"]),
        status=row["status"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def load_order(order_id: int) -> Order | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
    return _order_from_row(row) if row else None


def load_order_history(user_id: int) -> list[Order]:
    """A user's orders, newest first, restored without line items."""
    with _connect() as conn:
        rows = conn.execute(
            "SELECT * FROM orders WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (user_id,),
        ).fetchall()
    return [_order_from_row(row) for row in rows]


def load_order_items(order_id: int) -> list[OrderItem]:
    """Stored lines of an order; names and prices are the purchase-time snapshots."""
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT oi.menu_item_id, oi.menu_item_name, oi.price_at_purchase, oi.quantity, o.restaurant_id
            FROM order_items oi
            JOIN orders o ON o.id = oi.order_id
            WHERE oi.order_id = ?
            ORDER BY oi.line_index
            """,
            (order_id,),
        ).fetchall()
    return [
        OrderItem(
            item=MenuItem(
                item_id=row["menu_item_id"] or 0,
                restaurant_id=row["restaurant_id"] or 0,
                name=row["menu_item_name"],
                price=Decimal(row["price_at_purchase"]),
            ),
            quantity=row["quantity"],
            price_at_purchase=Decimal(row["price_at_purchase"]),
        )
        for row in rows
    ]


def update_order_status(order_id: int, status: OrderStatus | str) -> bool:
    """
    Move a stored order one step forward.

    Returns False for an unknown order; raises ``InvalidStatusTransition``
    for a skipped or backwards step.
    """
    order = load_order(order_id)
    if order is None:
        return False
    order.set_status(status)
    with _connect() as conn:
        with conn:
            conn.execute("UPDATE orders SET status = ? WHERE id = ?", (order.status.value, order_id))
    return True


# Reviews


def save_review(order_id: int, review: Review) -> int:
    """Store a review for a delivered order. Returns the review id or ``FAILED``."""
    with _connect() as conn:
        row = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
        if row is None:
            log.warning("Review rejected: order %s does not exist", order_id)
            return FAILED
        order = _order_from_row(row)
        if not order.can_review():
            log.warning("Review rejected: order %s is %s, not delivered", order_id, order.status.value)
            return FAILED
        if row["restaurant_id"] != review.restaurant_id or row["user_id"] != review.author.user_id:
            log.warning("Review rejected: order %s does not match reviewer or restaurant", order_id)
            return FAILED
        try:
            with conn:
                cur = conn.execute(
                    """
                    INSERT INTO reviews (order_id, restaurant_id, customer_id, rating, comment, review_date)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        order_id,
                        review.restaurant_id,
                        review.author.user_id,
                        review.rating,
                        review.comment,
                        review.review_date,
                    ),
                )
        except sqlite3.IntegrityError:
            log.warning("Review rejected: order %s already reviewed or reviewer unknown", order_id)
            return FAILED
    return int(cur.lastrowid)


def reviews_for_restaurant(restaurant_id: int) -> list[Review]:
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT r.restaurant_id, r.rating, r.comment, r.review_date,
                   u.id AS user_id, u.name AS user_name, u.email AS user_email
            FROM reviews r
            JOIN users u ON r.customer_id = u.id
            WHERE r.restaurant_id = ?
            ORDER BY r.review_date DESC
            """,
            (restaurant_id,),
        ).fetchall()
    return [
        Review(
            restaurant_id=row["restaurant_id"],
            rating=row["rating"],
            comment=row["comment"],
            author=Customer(user_id=row["user_id"], name=row["user_name"], email=row["user_email"]),
            review_date=row["review_date"],
        )
        for row in rows
    ]


def average_rating(restaurant_id: int) -> Decimal | None:
    with _connect() as conn:
        row = conn.execute(
            "SELECT AVG(rating) AS avg_rating FROM reviews WHERE restaurant_id = ?",
            (restaurant_id,),
        ).fetchone()
    if row["avg_rating"] is None:
        return None
    return as_decimal(str(row["avg_rating"])).quantize(Decimal("0.1"))
