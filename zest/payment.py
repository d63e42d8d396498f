"""Payment capabilities an order can be paid with."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Protocol

from zest.config import CURRENCY

log = logging.getLogger(__name__)


class PaymentMethod(ABC):
    """Charges (and, as compensation, refunds) an amount."""

    label = ""

    @abstractmethod
    def pay(self, amount: Decimal) -> bool:
        pass

    @abstractmethod
    def refund(self, amount: Decimal) -> bool:
        pass


class CashPayment(PaymentMethod):
    # Collected on delivery, so nothing can fail up front.
    label = "Cash"

    def pay(self, amount: Decimal) -> bool:
        log.info("Cash on delivery: %s %s", amount, CURRENCY)
        return True

    def refund(self, amount: Decimal) -> bool:
        log.info("Cash order cancelled, nothing to refund (%s %s)", amount, CURRENCY)
        return True


class PaymentGateway(Protocol):
    """Client API of an external payment provider."""

    def process_payment(self, amount: float, currency: str) -> bool: ...

    def refund_payment(self, amount: float, currency: str) -> bool: ...


class GatewayPaymentAdapter(PaymentMethod):
    """Adapts an external gateway client to the ``PaymentMethod`` interface."""

    label = "PayPal"

    def __init__(self, gateway: PaymentGateway, currency: str = CURRENCY) -> None:
        self.gateway = gateway
        self.currency = currency

    def pay(self, amount: Decimal) -> bool:
        log.info("Processing payment of %s %s via %s", amount, self.currency, self.label)
        try:
            return bool(self.gateway.process_payment(float(amount), self.currency))
        except Exception:
            log.exception("Payment gateway error while charging %s %s", amount, self.currency)
            return False

    def refund(self, amount: Decimal) -> bool:
        log.info("Refunding %s %s via %s", amount, self.currency, self.label)
        try:
            return bool(self.gateway.refund_payment(float(amount), self.currency))
        except Exception:
            log.exception("Payment gateway error while refunding %s %s", amount, self.currency)
            return False


class PaymentChoice(str, Enum):
    CASH = "cash"
    PAYPAL = "paypal"


def select_payment(choice: PaymentChoice | str, gateway: PaymentGateway | None = None) -> PaymentMethod:
    """Build the payment method the customer picked."""
    choice = PaymentChoice(choice)
    if choice is PaymentChoice.CASH:
        return CashPayment()
    if gateway is None:
        raise ValueError("an external payment needs a gateway client")
    return GatewayPaymentAdapter(gateway)
