"""Per-user session state: who is ordering, from where, and their cart."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from zest.cart import Cart
from zest.models import Restaurant

log = logging.getLogger(__name__)


@dataclass
class Session:
    """Owns exactly one cart; callers pass the session around instead of a global cart."""

    user_id: int | None = None
    cart: Cart = field(default_factory=Cart)
    restaurant: Restaurant | None = None

    def login(self, user_id: int) -> None:
        if user_id <= 0:
            raise ValueError("user_id must be a positive number")
        self.user_id = user_id

    def current_user_id(self) -> int | None:
        return self.user_id

    def select_restaurant(self, restaurant: Restaurant) -> None:
        """Choosing a restaurant always starts a fresh cart."""
        if not self.cart.is_empty:
            log.info("Restaurant %s selected, clearing cart", restaurant.restaurant_id)
        self.cart.clear()
        self.restaurant = restaurant

    def clear_selection(self) -> None:
        self.restaurant = None

    def logout(self) -> None:
        self.user_id = None
        self.cart.clear()
        self.clear_selection()
