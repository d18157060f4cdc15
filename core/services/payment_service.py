# =============================================================================
# core/services/payment_service.py - Stripe Payments
# =============================================================================
# Creates Stripe PaymentIntents for checkout. The storefront confirms the
# card with the returned client_secret, then calls confirm-payment.
#
# When STRIPE_SECRET_KEY is not configured, payments are disabled and
# orders are created without a client secret.
# =============================================================================

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

import stripe

from app.config import settings
from app.exceptions import PaymentError

logger = logging.getLogger(__name__)


def to_minor_units(amount: float) -> int:
    """Dollars -> integer cents for Stripe."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    """Thin wrapper around the Stripe SDK."""

    @staticmethod
    def enabled() -> bool:
        return settings.payments_enabled

    @staticmethod
    def create_payment_intent(amount: float, metadata: dict[str, Any]) -> dict[str, str]:
        """
        Create a PaymentIntent for an order total.

        Args:
            amount: Order total in dollars
            metadata: Order id / number stored on the intent

        Returns:
            {"id": ..., "client_secret": ...}

        Raises:
            PaymentError: If Stripe rejects the request
        """
        stripe.api_key = settings.STRIPE_SECRET_KEY

        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(amount),
                currency=settings.CURRENCY,
                metadata={key: str(value) for key, value in metadata.items()},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent creation failed: {e}")
            raise PaymentError(str(e))

        logger.info(f"Created PaymentIntent {intent.id} for {metadata.get('order_number')}")
        return {"id": intent.id, "client_secret": intent.client_secret}
