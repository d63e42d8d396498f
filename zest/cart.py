"""Per-session shopping cart restricted to a single restaurant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Hashable, Iterator

from zest.models import Orderable

log = logging.getLogger(__name__)


@dataclass
class CartLine:
    """One cart entry: the latest seen instance of an item and its quantity."""

    item: Orderable
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.item.price * self.quantity


class Cart:
    """
    Selected items and quantities for one session.

    Lines are keyed by the item's stable ``line_key`` rather than object
    identity, so a menu item re-fetched from the catalog lands on the same
    line. While the cart is non-empty every line belongs to
    ``restaurant_id``.
    """

    def __init__(self) -> None:
        self._lines: dict[Hashable, CartLine] = {}
        self.restaurant_id: int | None = None

    def can_add(self, item: Orderable) -> bool:
        return self.restaurant_id is None or item.restaurant_id == self.restaurant_id

    def add(self, item: Orderable) -> bool:
        """Add one unit. Returns False (and changes nothing) for another restaurant's item."""
        if not self.can_add(item):
            log.info(
                "Rejected item %s from restaurant %s; cart belongs to restaurant %s",
                item.item_id,
                item.restaurant_id,
                self.restaurant_id,
            )
            return False

        line = self._lines.get(item.line_key)
        if line is None:
            self._lines[item.line_key] = CartLine(item=item, quantity=1)
        else:
            line.item = item
            line.quantity += 1
        if self.restaurant_id is None:
            self.restaurant_id = item.restaurant_id
        return True

    def remove(self, item: Orderable) -> None:
        """Drop the whole line regardless of quantity."""
        self._lines.pop(item.line_key, None)
        if not self._lines:
            self.restaurant_id = None

    def set_quantity(self, item: Orderable, quantity: int) -> bool:
        if quantity <= 0:
            self.remove(item)
            return True
        if not self.can_add(item):
            return False

        line = self._lines.get(item.line_key)
        if line is None:
            self._lines[item.line_key] = CartLine(item=item, quantity=quantity)
        else:
            line.item = item
            line.quantity = quantity
        if self.restaurant_id is None:
            self.restaurant_id = item.restaurant_id
        return True

    def quantity_of(self, item: Orderable) -> int:
        line = self._lines.get(item.line_key)
        return line.quantity if line is not None else 0

    def subtotal(self) -> Decimal:
        """Sum of live price times quantity over all lines."""
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def clear(self) -> None:
        self._lines.clear()
        self.restaurant_id = None

    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(line.quantity for line in self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines())

    def __contains__(self, item: object) -> bool:
        key = getattr(item, "line_key", None)
        return key is not None and key in self._lines
