"""Domain models for the ordering core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Hashable, Protocol

from zest.config import DEFAULT_ITEM_IMAGE, DEFAULT_RESTAURANT_IMAGE
from zest.pricing import Number, as_decimal


class Orderable(Protocol):
    """Anything that can sit in a cart and be snapshotted into an order line."""

    @property
    def item_id(self) -> int: ...

    @property
    def restaurant_id(self) -> int: ...

    @property
    def name(self) -> str: ...

    @property
    def price(self) -> Decimal: ...

    @property
    def line_key(self) -> Hashable: ...


@dataclass(eq=False)
class MenuItem:
    """A dish on a restaurant menu. ``price`` is the live price."""

    item_id: int
    restaurant_id: int
    name: str
    price: Decimal
    available: bool = True
    description: str = ""
    image_url: str = DEFAULT_ITEM_IMAGE

    def __post_init__(self) -> None:
        self.price = as_decimal(self.price)
        if self.price < 0:
            raise ValueError("price must not be negative")

    @property
    def line_key(self) -> int:
        return self.item_id

    def update_price(self, new_price: Number) -> None:
        """Merchant price change; recorded orders keep their own snapshot."""
        price = as_decimal(new_price)
        if price < 0:
            raise ValueError("price must not be negative")
        self.price = price


@dataclass(frozen=True)
class Restaurant:
    """A restaurant customers can order from."""

    restaurant_id: int
    name: str
    image_url: str = DEFAULT_RESTAURANT_IMAGE


@dataclass(frozen=True)
class Customer:
    """A customer taking part in an order."""

    user_id: int
    name: str
    email: str = ""


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"

    @classmethod
    def parse(cls, text: str | None) -> "OrderStatus":
        """Parse a stored status; unknown or empty text means PENDING."""
        if not text:
            return cls.PENDING
        try:
            return cls(text.strip().upper())
        except ValueError:
            return cls.PENDING

    @property
    def next_status(self) -> "OrderStatus | None":
        return _NEXT_STATUS.get(self)

    def can_transition_to(self, other: "OrderStatus") -> bool:
        return self.next_status is other


_NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.DELIVERED,
}


class InvalidStatusTransition(ValueError):
    """Raised when an order status change skips a step or goes backwards."""

    def __init__(self, current: OrderStatus, requested: OrderStatus) -> None:
        super().__init__(f"cannot move order from {current.value} to {requested.value}")
        self.current = current
        self.requested = requested


@dataclass(frozen=True)
class Review:
    """A customer's rating of a restaurant after a delivered order."""

    restaurant_id: int
    rating: int
    comment: str
    author: Customer
    review_date: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __post_init__(self) -> None:
        if not (1 <= self.rating <= 5):
            raise ValueError("rating must be between 1 and 5")
