# apps/domain/ports/payments.py

"""
Payment Gateway Port - Interface for hosted checkout

The domain never talks to the processor SDK directly.
"""

from typing import Protocol
from uuid import UUID

from apps.domain.models import PaymentSession, Tier


class IPaymentGateway(Protocol):
    """
    Interface for a payment processor with embedded checkout
    """

    publishable_key: str

    def open_session(
            self,
            tier: Tier,
            customer_email: str,
            customer_name: str,
            request_id: UUID,
            return_url: str,
    ) -> str:
        """
        Create a checkout session for a tier and request

        request_id, tier and customer_name travel with the session as
        opaque metadata so the lifecycle can resume after payment.

        Returns:
            Client secret usable by the payment widget

        Raises:
            PaymentProviderError: If the processor rejects the call
        """
        ...

    def poll_session(self, session_id: str) -> PaymentSession:
        """
        Read the processor's record of a checkout session

        Never raises for processor failures: returns a session whose
        status is "error" instead.
        """
        ...
