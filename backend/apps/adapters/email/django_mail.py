# apps/adapters/email/django_mail.py
"""
Django Email Sender Adapter

Delivers HTML mail through Django's configured EMAIL_BACKEND.
"""
from typing import Optional
import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import strip_tags

from apps.domain.models import NotificationError

logger = logging.getLogger(__name__)


class DjangoEmailSender:
    """
    SMTP (or any Django backend) email sender

    A plain-text alternative is derived from the HTML body.
    """

    def __init__(self, from_email: Optional[str] = None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send(self, to: str, subject: str, html: str) -> None:
        try:
            send_mail(
                subject,
                strip_tags(html),
                self.from_email,
                [to],
                html_message=html,
                fail_silently=False,
            )
        except Exception as e:
            raise NotificationError(f"Email delivery failed: {e}") from e

        logger.debug(f"Email handed to backend for {to}")
