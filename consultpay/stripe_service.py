import logging

import stripe

from consultpay.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class StripeGateway:
    """Creates gateway orders as Stripe PaymentIntents."""

    def __init__(self, api_key: str):
        self.api_key = api_key

    def create_order(self, amount: int, currency: str, receipt: str):
        try:
            return stripe.PaymentIntent.create(
                amount=amount,
                currency=currency.lower(),
                automatic_payment_methods={"enabled": True},
                metadata={"receipt": receipt},
                idempotency_key=receipt,
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.error("Gateway order creation failed for receipt %s: %s", receipt, type(exc).__name__)
            raise UpstreamError("Failed to create order") from exc
