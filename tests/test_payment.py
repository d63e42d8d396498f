from decimal import Decimal

import pytest

from zest.payment import CashPayment, GatewayPaymentAdapter, PaymentChoice, select_payment


class BrokenGateway:
    def process_payment(self, amount, currency):
        raise ConnectionError("gateway unreachable")

    def refund_payment(self, amount, currency):
        raise ConnectionError("gateway unreachable")


def test_cash_always_succeeds():
    cash = CashPayment()
    assert cash.pay(Decimal("10")) is True
    assert cash.refund(Decimal("10")) is True


def test_gateway_errors_become_failures():
    adapter = GatewayPaymentAdapter(BrokenGateway())
    assert adapter.pay(Decimal("10")) is False
    assert adapter.refund(Decimal("10")) is False


def test_select_payment():
    assert isinstance(select_payment("cash"), CashPayment)
    assert isinstance(select_payment(PaymentChoice.PAYPAL, BrokenGateway()), GatewayPaymentAdapter)
    with pytest.raises(ValueError):
        select_payment(PaymentChoice.PAYPAL)
    with pytest.raises(ValueError):
        select_payment("bitcoin")
