from zest.cart import CartLine
from zest.checkout import CheckoutResult, CheckoutStatus
from zest.models import Customer, OrderStatus
from zest.order import Order
from zest.pricing import PriceBreakdown
from zest.rendering import (
    format_breakdown,
    format_cart_line,
    format_checkout_result,
    format_order_summary,
    format_split,
    money,
)


def test_money():
    assert money(85) == "85.00 EGP"


def test_cart_line(whopper):
    assert format_cart_line(CartLine(whopper, 2)).plain == "Whopper x2 - 85.00 EGP each = 170.00 EGP"
    assert format_cart_line(CartLine(whopper, 1)).plain == "Whopper - 85.00 EGP"


def test_breakdown():
    plain = format_breakdown(PriceBreakdown.from_subtotal(200)).plain
    assert plain.splitlines() == [
        "Subtotal: 200.00 EGP",
        "VAT (14%): 28.00 EGP",
        "Delivery: 25.00 EGP",
        "Total: 253.00 EGP",
    ]


def test_failed_checkout_shows_message_and_refund():
    result = CheckoutResult(CheckoutStatus.ORDER_FAILED, "Failed to save order.", payment_refunded=True)
    assert format_checkout_result(result).plain == "Failed to save order.\nYour payment has been refunded."


def test_placed_checkout_lists_breakdown():
    result = CheckoutResult(
        CheckoutStatus.PLACED,
        "Order #5 placed.",
        order_id=5,
        breakdown=PriceBreakdown.from_subtotal(200),
        loyalty_points=25,
    )
    plain = format_checkout_result(result).plain
    assert plain.startswith("Order #5 confirmed")
    assert "Total: 253.00 EGP" in plain
    assert plain.endswith("Loyalty points earned: 25")


def test_order_summary_and_split():
    order = Order.restore(7, 2, "253.00", "READY")
    assert format_order_summary(order).plain == "Order #7  READY  253.00 EGP"
    split = {Customer(3, "Hamdy"): 30, Customer(2, "Ziad"): 260}
    assert format_split(split).plain == "Hamdy: 30.00 EGP\nZiad: 260.00 EGP"
    assert OrderStatus.READY.value in format_order_summary(order).plain
