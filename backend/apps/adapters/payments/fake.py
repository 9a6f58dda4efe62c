# apps/adapters/payments/fake.py
"""
Fake Payment Gateway for testing

Keeps checkout sessions in memory; tests flip them to "complete".
"""
from typing import Dict, List
from uuid import UUID

from apps.domain.models import PaymentProviderError, PaymentSession, Tier


class FakePaymentGateway:
    """
    In-memory checkout sessions

    open_session() returns a client secret "<session_id>_secret". Tests
    call complete() to simulate the customer paying.
    """

    def __init__(self, publishable_key: str = "pk_test_fake", fail: bool = False):
        self.publishable_key = publishable_key
        self.fail = fail
        self.sessions: Dict[str, PaymentSession] = {}
        self.opened: List[dict] = []
        self.poll_count = 0

    def open_session(
            self,
            tier: Tier,
            customer_email: str,
            customer_name: str,
            request_id: UUID,
            return_url: str,
    ) -> str:
        if self.fail:
            raise PaymentProviderError("Fake processor unavailable")

        session_id = f"cs_test_{len(self.opened) + 1}"
        self.sessions[session_id] = PaymentSession(
            status="open",
            customer_email=customer_email,
            request_id=str(request_id),
            tier=tier.value,
        )
        self.opened.append({
            "session_id": session_id,
            "tier": tier,
            "customer_email": customer_email,
            "customer_name": customer_name,
            "request_id": request_id,
            "return_url": return_url,
            "amount_cents": tier.info.price_cents,
        })
        return f"{session_id}_secret"

    def poll_session(self, session_id: str) -> PaymentSession:
        self.poll_count += 1
        return self.sessions.get(session_id, PaymentSession.error())

    def add_session(self, session_id: str, session: PaymentSession):
        """Register a session directly"""
        self.sessions[session_id] = session

    def complete(self, session_id: str):
        """Mark session as paid"""
        current = self.sessions[session_id]
        self.sessions[session_id] = PaymentSession(
            status="complete",
            customer_email=current.customer_email,
            request_id=current.request_id,
            tier=current.tier,
        )
