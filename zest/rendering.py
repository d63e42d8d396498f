"""Rendering helpers for carts, price breakdowns and orders."""

from __future__ import annotations

from decimal import Decimal

from rich.text import Text

from zest.cart import CartLine
from zest.checkout import CheckoutResult
from zest.config import CURRENCY, VAT_RATE
from zest.models import Customer, OrderStatus
from zest.order import Order
from zest.pricing import PriceBreakdown, quantize


def money(value: Decimal | int) -> str:
    return f"{quantize(value)} {CURRENCY}"


def status_style(status: OrderStatus) -> str:
    """Return a consistent badge style for an order status."""
    if status is OrderStatus.PENDING:
        return "bold #0b1f0f on #e0c341"
    if status is OrderStatus.PREPARING:
        return "bold #ffffff on #2f6db5"
    if status is OrderStatus.READY:
        return "bold #ffffff on #b23a48"
    return "bold #0b1f0f on #5fbf72"


def format_status_badge(status: OrderStatus) -> Text:
    return Text(f" {status.value} ", style=status_style(status))


def format_cart_line(line: CartLine) -> Text:
    """``Whopper x2 - 85.00 EGP each = 170.00 EGP``, or just the price for a single unit."""
    text = Text(line.item.name, style="bold")
    if line.quantity > 1:
        text.append(f" x{line.quantity}")
        text.append(f" - {money(line.item.price)} each = {money(line.line_total)}")
    else:
        text.append(f" - {money(line.item.price)}")
    return text


def format_breakdown(breakdown: PriceBreakdown) -> Text:
    vat_percent = (VAT_RATE * 100).normalize()
    text = Text()
    text.append(f"Subtotal: {money(breakdown.subtotal)}\n")
    text.append(f"VAT ({vat_percent:f}%): {money(breakdown.vat)}\n")
    text.append(f"Delivery: {money(breakdown.delivery)}\n")
    text.append(f"Total: {money(breakdown.total)}", style="bold")
    return text


def format_checkout_result(result: CheckoutResult) -> Text:
    if not result.ok:
        text = Text(result.message, style="bold red")
        if result.payment_refunded:
            text.append("\nYour payment has been refunded.", style="yellow")
        return text

    text = Text(f"Order #{result.order_id} confirmed\n", style="bold green")
    if result.order is not None and result.order.payment is not None:
        text.append(f"Payment Method: {result.order.payment.label}\n")
    if result.breakdown is not None:
        text.append_text(format_breakdown(result.breakdown))
    if result.loyalty_points:
        text.append(f"\nLoyalty points earned: {result.loyalty_points}")
    return text


def format_order_summary(order: Order) -> Text:
    """One history row: id, status badge and total."""
    text = Text(f"Order #{order.order_id} ")
    text.append_text(format_status_badge(order.status))
    text.append(f" {money(order.calculate_total())}")
    return text


def format_split(split: dict[Customer, Decimal]) -> Text:
    text = Text()
    for idx, (customer, amount) in enumerate(sorted(split.items(), key=lambda kv: kv[0].name)):
        if idx > 0:
            text.append("\n")
        text.append(customer.name, style="bold")
        text.append(f": {money(amount)}")
    return text
