"""Checkout: turn a session's cart into a paid, persisted order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from zest.order import Order, OrderItem
from zest.payment import PaymentChoice, PaymentGateway, PaymentMethod, select_payment
from zest.pricing import PriceBreakdown, loyalty_points_for, quantize
from zest.session import Session

log = logging.getLogger(__name__)

SaveOrder = Callable[[Order], int]


@dataclass(frozen=True)
class DeliveryAddress:
    street: str
    city: str
    phone: str

    def missing_fields(self) -> list[str]:
        """Names of required fields that are blank after trimming."""
        return [
            name
            for name, value in (("street", self.street), ("city", self.city), ("phone", self.phone))
            if not (value or "").strip()
        ]


class CheckoutStatus(str, Enum):
    PLACED = "placed"
    EMPTY_CART = "empty_cart"
    INVALID_ADDRESS = "invalid_address"
    NOT_AUTHENTICATED = "not_authenticated"
    PAYMENT_FAILED = "payment_failed"
    ORDER_FAILED = "order_failed"


@dataclass(frozen=True)
class CheckoutResult:
    """Outcome of a checkout attempt; failures are values, not exceptions."""

    status: CheckoutStatus
    message: str
    order: Order | None = None
    order_id: int | None = None
    breakdown: PriceBreakdown | None = None
    payment_refunded: bool = False
    loyalty_points: int = 0

    @property
    def ok(self) -> bool:
        return self.status is CheckoutStatus.PLACED


class CheckoutService:
    """
    Runs the checkout steps in order, stopping at the first failure.

    ``save_order`` is the persistence collaborator: it returns the new
    order id, or a non-positive value when the order could not be stored.
    ``current_user_id`` resolves the acting user; it defaults to the
    session's own lookup.
    """

    def __init__(
        self,
        save_order: SaveOrder,
        current_user_id: Callable[[], int | None] | None = None,
        gateway: PaymentGateway | None = None,
    ) -> None:
        self.save_order = save_order
        self.current_user_id = current_user_id
        self.gateway = gateway

    def place_order(
        self,
        session: Session,
        address: DeliveryAddress,
        payment: PaymentChoice | str | PaymentMethod = PaymentChoice.CASH,
    ) -> CheckoutResult:
        cart = session.cart
        if cart.is_empty:
            return CheckoutResult(
                CheckoutStatus.EMPTY_CART,
                "Your cart is empty. Please add items before placing an order.",
            )

        missing = address.missing_fields()
        if missing:
            return CheckoutResult(
                CheckoutStatus.INVALID_ADDRESS,
                f"Please fill in all address fields ({', '.join(missing)}).",
            )

        resolve_user = self.current_user_id or session.current_user_id
        user_id = resolve_user()
        if not user_id:
            return CheckoutResult(CheckoutStatus.NOT_AUTHENTICATED, "Please log in again.")

        payment_method = payment if isinstance(payment, PaymentMethod) else select_payment(payment, self.gateway)

        breakdown = PriceBreakdown.from_subtotal(cart.subtotal())

        order = Order(user_id=user_id, payment=payment_method)
        for line in cart.lines():
            order.add_order_item(OrderItem.snapshot(line.item, line.quantity))
        order.total_amount = quantize(order.calculate_total() + breakdown.vat + breakdown.delivery)

        charged = order.calculate_total()
        if not order.pay():
            log.warning("Payment failed for user %s (%s)", user_id, payment_method.label)
            return CheckoutResult(
                CheckoutStatus.PAYMENT_FAILED,
                "Payment processing failed. Please try again.",
                order=order,
                breakdown=breakdown,
            )

        order_id = self._persist(order)
        if order_id is None:
            refunded = payment_method.refund(charged)
            if not refunded:
                log.error("Refund of %s failed for user %s after order save failure", charged, user_id)
            return CheckoutResult(
                CheckoutStatus.ORDER_FAILED,
                "Failed to save order. Please try again.",
                order=order,
                breakdown=breakdown,
                payment_refunded=refunded,
            )

        order.order_id = order_id
        cart.clear()
        session.clear_selection()
        log.info("Order %s placed by user %s, total %s", order_id, user_id, order.total_amount)
        return CheckoutResult(
            CheckoutStatus.PLACED,
            f"Order #{order_id} placed.",
            order=order,
            order_id=order_id,
            breakdown=breakdown,
            loyalty_points=loyalty_points_for(order.total_amount),
        )

    def _persist(self, order: Order) -> int | None:
        try:
            order_id = self.save_order(order)
        except Exception:
            log.exception("Persistence raised while saving order for user %s", order.user_id)
            return None
        if order_id is None or order_id <= 0:
            log.error("Persistence rejected order for user %s", order.user_id)
            return None
        return order_id
