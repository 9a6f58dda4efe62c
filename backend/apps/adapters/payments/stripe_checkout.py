# apps/adapters/payments/stripe_checkout.py
"""
Stripe Payment Gateway Adapter

Opens embedded Checkout sessions and polls their status.
"""
from typing import Any, Optional
from uuid import UUID
import logging

import stripe

from apps.domain.models import PaymentProviderError, PaymentSession, Tier

logger = logging.getLogger(__name__)


class StripeCheckoutGateway:
    """
    Stripe embedded Checkout implementation

    Each tier is billed as a one-off inline price; no products need to
    exist in the Stripe dashboard.
    """

    def __init__(
            self,
            secret_key: str,
            publishable_key: str = "",
            currency: str = "usd",
            product_prefix: str = "Kings Advice",
    ):
        """
        Initialize Stripe gateway

        Args:
            secret_key: Stripe secret API key
            publishable_key: Key handed to the browser widget
            currency: ISO currency code for line items
            product_prefix: Prepended to tier names on the receipt
        """
        if not secret_key:
            raise ValueError("Stripe secret key is required")

        self.secret_key = secret_key
        self.publishable_key = publishable_key
        self.currency = currency
        self.product_prefix = product_prefix

        logger.info("Stripe checkout gateway initialized")

    def open_session(
            self,
            tier: Tier,
            customer_email: str,
            customer_name: str,
            request_id: UUID,
            return_url: str,
    ) -> str:
        """
        Create an embedded Checkout session

        Returns:
            Session client secret

        Raises:
            PaymentProviderError: If Stripe rejects the call
        """
        info = tier.info

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                ui_mode="embedded",
                payment_method_types=["card"],
                mode="payment",
                customer_email=customer_email,
                line_items=[{
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {
                            "name": f"{self.product_prefix} - {info.display_name}",
                            "description": f"{info.display_name} consultation",
                        },
                        "unit_amount": info.price_cents,
                    },
                    "quantity": 1,
                }],
                metadata={
                    "requestId": str(request_id),
                    "tier": tier.value,
                    "customerName": customer_name,
                },
                return_url=f"{return_url}?session_id={{CHECKOUT_SESSION_ID}}",
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe session creation failed for request {request_id}: {e}")
            raise PaymentProviderError(f"Stripe error: {e}")

        logger.info(
            f"Opened checkout session {session.id} for request {request_id}",
            extra={"tier": tier.value, "amount_cents": info.price_cents},
        )
        return session.client_secret

    def poll_session(self, session_id: str) -> PaymentSession:
        """
        Retrieve a Checkout session

        Returns:
            PaymentSession; status "error" if Stripe could not be read
        """
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.secret_key)
        except stripe.StripeError as e:
            logger.warning(f"Could not retrieve checkout session {session_id}: {e}")
            return PaymentSession.error()

        details = getattr(session, "customer_details", None)
        email = getattr(details, "email", None) if details else None
        metadata = getattr(session, "metadata", None)

        return PaymentSession(
            status=session.status,
            customer_email=email or getattr(session, "customer_email", None),
            request_id=_metadata_value(metadata, "requestId"),
            tier=_metadata_value(metadata, "tier"),
        )


def _metadata_value(metadata: Any, key: str) -> Optional[str]:
    if not metadata:
        return None
    try:
        return metadata[key]
    except KeyError:
        return None
