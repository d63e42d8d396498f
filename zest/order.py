"""Orders with frozen line prices, plus shared group orders with bill splitting."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from zest.config import SHARE_LINK_PREFIX, SHARE_TOKEN_BYTES
from zest.models import Customer, InvalidStatusTransition, Orderable, OrderStatus
from zest.payment import PaymentMethod
from zest.pricing import Number, as_decimal

log = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """
    A purchased line.

    ``item`` is kept for display only. ``price_at_purchase`` is fixed when
    the line is created and never re-read from the item.
    """

    item: Orderable
    quantity: int
    price_at_purchase: Decimal

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("quantity must be a positive number")
        object.__setattr__(self, "price_at_purchase", as_decimal(self.price_at_purchase))

    @classmethod
    def snapshot(cls, item: Orderable, quantity: int) -> "OrderItem":
        """Capture the item's current price as the purchase price."""
        return cls(item=item, quantity=quantity, price_at_purchase=item.price)

    @property
    def name(self) -> str:
        return self.item.name

    def calculate_total(self) -> Decimal:
        return self.price_at_purchase * self.quantity


@dataclass(eq=False)
class Order:
    """An order being built at checkout, or restored from history."""

    user_id: int
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderItem] = field(default_factory=list)
    payment: PaymentMethod | None = None
    total_amount: Decimal = Decimal("0")
    order_id: int | None = None
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        self.total_amount = as_decimal(self.total_amount)

    @classmethod
    def restore(
        cls,
        order_id: int,
        user_id: int,
        total_amount: Number,
        status: str | None,
        created_at: datetime | None = None,
    ) -> "Order":
        """Rebuild a persisted order without its line items."""
        return cls(
            user_id=user_id,
            status=OrderStatus.parse(status),
            total_amount=as_decimal(total_amount),
            order_id=order_id,
            created_at=created_at or _utc_now(),
        )

    def add_order_item(self, order_item: OrderItem) -> None:
        self.items.append(order_item)

    def calculate_total(self) -> Decimal:
        """Sum of frozen line totals; the stored total when no lines are loaded."""
        if not self.items:
            return self.total_amount
        return sum((item.calculate_total() for item in self.items), Decimal("0"))

    def pay(self) -> bool:
        if self.payment is None:
            log.warning("Order %s has no payment method attached", self.order_id)
            return False
        return self.payment.pay(self.calculate_total())

    def set_status(self, new_status: OrderStatus | str) -> None:
        """Advance one step along PENDING -> PREPARING -> READY -> DELIVERED."""
        if isinstance(new_status, str) and not isinstance(new_status, OrderStatus):
            new_status = new_status.strip().upper()
        requested = OrderStatus(new_status)
        if requested is self.status:
            return
        if not self.status.can_transition_to(requested):
            raise InvalidStatusTransition(self.status, requested)
        log.info("Order %s status %s -> %s", self.order_id, self.status.value, requested.value)
        self.status = requested

    def can_review(self) -> bool:
        return self.status is OrderStatus.DELIVERED


def new_share_token() -> str:
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


@dataclass(eq=False)
class GroupOrder(Order):
    """An order several customers add to; each pays for what they added."""

    participant_splits: dict[Customer, list[OrderItem]] = field(default_factory=dict)
    share_token: str = field(default_factory=new_share_token)

    def __post_init__(self) -> None:
        super().__post_init__()
        contributed = {id(item) for items in self.participant_splits.values() for item in items}
        if contributed != {id(item) for item in self.items}:
            raise ValueError("group order lines must each belong to a participant")

    @property
    def share_link(self) -> str:
        return f"{SHARE_LINK_PREFIX}{self.share_token}"

    def add_to_group(self, customer: Customer, order_item: OrderItem) -> None:
        self.participant_splits.setdefault(customer, []).append(order_item)
        super().add_order_item(order_item)

    def add_order_item(self, order_item: OrderItem) -> None:
        raise ValueError("group order lines are added with add_to_group")

    def calculate_total(self) -> Decimal:
        """Sum of all participants' lines, so the split always adds up to it."""
        return sum(self.split_bill().values(), Decimal("0"))

    def participants(self) -> list[Customer]:
        return list(self.participant_splits)

    def split_bill(self) -> dict[Customer, Decimal]:
        """Each participant's share: the frozen totals of the lines they added."""
        return {
            customer: sum((item.calculate_total() for item in items), Decimal("0"))
            for customer, items in self.participant_splits.items()
        }
