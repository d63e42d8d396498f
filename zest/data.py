"""Static demo catalog used to seed an empty database."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DemoDish:
    name: str
    price: str
    description: str


DEMO_RESTAURANTS: dict[str, str] = {
    "Burger King": "bk.png",
    "Pizza Hut": "pizza.png",
    "KFC": "kfc.png",
}

DEMO_MENU: dict[str, list[DemoDish]] = {
    "Burger King": [
        DemoDish("Whopper", "85.00", "Flame-grilled beef patty"),
        DemoDish("Chicken Royale", "75.00", "Crispy chicken sandwich"),
        DemoDish("Fries (Medium)", "30.00", "Golden crispy fries"),
    ],
    "Pizza Hut": [
        DemoDish("Super Supreme (M)", "150.00", "Loaded with toppings"),
        DemoDish("Pepperoni (M)", "130.00", "Classic pepperoni pizza"),
    ],
    "KFC": [
        DemoDish("Mighty Bucket", "200.00", "2 Pieces chicken + rice"),
        DemoDish("Rizo", "60.00", "Rice with spicy sauce"),
    ],
}
