# apps/domain/ports/notifications.py

"""
Email Sender Port - Interface for transactional email delivery
"""

from typing import Protocol


class IEmailSender(Protocol):
    """
    Interface for an email provider
    """

    def send(self, to: str, subject: str, html: str) -> None:
        """
        Hand one HTML message to the provider

        Raises:
            NotificationError: If the provider refused or was unreachable
        """
        ...
