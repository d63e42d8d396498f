"""Topping add-ons that wrap an orderable item and adjust its name and price."""

from __future__ import annotations

from decimal import Decimal
from typing import Hashable, Iterable

from zest.config import EXTRA_CHEESE_PRICE
from zest.models import Orderable
from zest.pricing import Number, as_decimal


class ToppingDecorator:
    """
    Wraps another orderable (a menu item or another topping).

    Identity and restaurant come from the wrapped item; name and price
    are derived from it on every access, so a merchant price change on the
    base dish shows up until the line is snapshotted at checkout.
    """

    topping_id = ""
    label = ""
    surcharge = Decimal("0")

    def __init__(self, wrapped: Orderable) -> None:
        self.wrapped = wrapped

    @property
    def item_id(self) -> int:
        return self.wrapped.item_id

    @property
    def restaurant_id(self) -> int:
        return self.wrapped.restaurant_id

    @property
    def name(self) -> str:
        return f"{self.wrapped.name}, {self.label}"

    @property
    def price(self) -> Decimal:
        return self.wrapped.price + self.surcharge

    @property
    def line_key(self) -> Hashable:
        return (self.wrapped.line_key, self.topping_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.wrapped!r})"


class ExtraCheese(ToppingDecorator):
    topping_id = "extra_cheese"
    label = "Extra Cheese"
    surcharge = EXTRA_CHEESE_PRICE


class CustomTopping(ToppingDecorator):
    """A topping defined at runtime, e.g. from a merchant's add-on list."""

    def __init__(self, wrapped: Orderable, topping_id: str, label: str, surcharge: Number) -> None:
        super().__init__(wrapped)
        if not topping_id:
            raise ValueError("topping_id must not be empty")
        amount = as_decimal(surcharge)
        if amount < 0:
            raise ValueError("surcharge must not be negative")
        self.topping_id = topping_id
        self.label = label
        self.surcharge = amount


TOPPINGS: dict[str, type[ToppingDecorator]] = {
    ExtraCheese.topping_id: ExtraCheese,
}


def with_toppings(item: Orderable, topping_ids: Iterable[str]) -> Orderable:
    """Stack the named toppings on ``item`` in the given order."""
    decorated = item
    for topping_id in topping_ids:
        topping_cls = TOPPINGS.get(topping_id)
        if topping_cls is None:
            raise ValueError(f"Unknown topping: {topping_id}")
        decorated = topping_cls(decorated)
    return decorated
