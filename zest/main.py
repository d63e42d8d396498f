"""Entry point: run a demo checkout and group split against the local database."""

from __future__ import annotations

from rich.console import Console

from zest import persistence
from zest.catalog import CatalogLoader, search_restaurants
from zest.checkout import CheckoutService, DeliveryAddress
from zest.logger import setup_logger
from zest.models import Customer, MenuItem
from zest.order import GroupOrder, OrderItem
from zest.payment import PaymentChoice
from zest.rendering import format_cart_line, format_checkout_result, format_order_summary, format_split
from zest.session import Session
from zest.toppings import ExtraCheese

DEMO_EMAIL = "ziad@gmail.com"


def main() -> None:
    log = setup_logger()
    console = Console()

    persistence.bootstrap_schema()
    persistence.seed_demo_catalog()

    customer = persistence.find_customer_by_email(DEMO_EMAIL) or persistence.add_customer("Ziad", DEMO_EMAIL)
    session = Session()
    session.login(customer.user_id)

    matches = search_restaurants(persistence.fetch_restaurants(), "burger")
    if not matches:
        console.print("No restaurant matches the demo search.", style="bold red")
        return
    restaurant = matches[0]
    session.select_restaurant(restaurant)

    menu: list[MenuItem] = []
    with CatalogLoader() as loader:
        loader.request_menu(restaurant.restaurant_id, lambda _rid, items: menu.extend(items)).result()
        loader.deliver_ready()

    if not menu:
        console.print(f"{restaurant.name} has no menu yet.", style="bold red")
        return
    for item in menu:
        session.cart.add(item)
    session.cart.add(ExtraCheese(menu[0]))

    console.print(f"[bold]{restaurant.name}[/bold] cart:")
    for line in session.cart.lines():
        console.print(format_cart_line(line))

    service = CheckoutService(save_order=persistence.save_order)
    result = service.place_order(
        session,
        DeliveryAddress(street="12 Tahrir St", city="Cairo", phone="01000000000"),
        PaymentChoice.CASH,
    )
    console.print(format_checkout_result(result))
    if result.ok and result.loyalty_points:
        persistence.award_loyalty_points(customer.user_id, result.loyalty_points)

    friend = Customer(user_id=0, name="Hamdy")
    group = GroupOrder(user_id=customer.user_id)
    group.add_to_group(customer, OrderItem.snapshot(menu[0], 1))
    group.add_to_group(friend, OrderItem.snapshot(menu[-1], 2))
    console.print(f"\nGroup order {group.share_link}")
    console.print(format_split(group.split_bill()))

    console.print("\n[bold]Order history[/bold]")
    for order in persistence.load_order_history(customer.user_id):
        console.print(format_order_summary(order))
    log.info("Demo finished")


if __name__ == "__main__":
    main()
