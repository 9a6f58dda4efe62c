# apps/adapters/email/fake.py
"""
Fake Email Sender for testing
"""
from dataclasses import dataclass
from typing import List

from apps.domain.models import NotificationError


@dataclass(frozen=True)
class SentEmail:
    to: str
    subject: str
    html: str


class FakeEmailSender:
    """
    Records messages instead of delivering them

    With fail=True every send raises NotificationError.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[SentEmail] = []

    def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise NotificationError("Fake provider unavailable")
        self.sent.append(SentEmail(to=to, subject=subject, html=html))

    def sent_to(self, address: str) -> List[SentEmail]:
        return [email for email in self.sent if email.to == address]

    def clear(self):
        self.sent.clear()
