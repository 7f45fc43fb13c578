"""
Stripe integration for the purchase flow.

The storefront never sees card data. It asks Stripe for a hosted
Checkout Session priced for one album and hands the session id and
redirect URL back to the browser, which completes payment on Stripe's
page and is sent back to ``success_url`` or ``cancel_url``.

Route handlers depend on the ``PaymentProcessor`` protocol rather than
on Stripe directly so that tests can plug in a fake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional, Protocol

import stripe


logger = logging.getLogger(__name__)


class PaymentProcessorError(Exception):
    """The processor rejected or failed a request; ``reason`` is its message."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class CheckoutRequest:
    amount: int  # minor units (cents)
    currency: str
    product_name: str
    description: str
    success_url: str
    cancel_url: str
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class CheckoutSession:
    session_id: str
    url: Optional[str] = None


class PaymentProcessor(Protocol):
    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        ...


def to_minor_units(price: str) -> int:
    """Convert a decimal price string to integer minor units, half-up.

    >>> to_minor_units("5.00")
    500
    """
    cents = (Decimal(price) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


class StripeCheckout:
    """``PaymentProcessor`` backed by Stripe Checkout Sessions."""

    def __init__(self, api_key: str):
        self._api_key = api_key
        # Failures are reported to the caller immediately.
        stripe.max_network_retries = 0

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self._api_key,
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": request.currency,
                            "product_data": {
                                "name": request.product_name,
                                "description": request.description,
                            },
                            "unit_amount": request.amount,
                        },
                        "quantity": 1,
                    }
                ],
                mode="payment",
                success_url=request.success_url,
                cancel_url=request.cancel_url,
                metadata=request.metadata,
            )
        except stripe.StripeError as exc:
            reason = exc.user_message or str(exc)
            logger.error("Stripe checkout session creation failed: %s", reason)
            raise PaymentProcessorError(reason) from exc

        logger.info("Created Stripe checkout session %s", session.id)
        return CheckoutSession(session_id=session.id, url=session.url)
