# apps/domain/services/notification_service.py

"""
Notification Service - Templated lifecycle emails

Renders one HTML email per lifecycle scenario and hands it to the
email sender. Delivery is best-effort: send() reports success as a
boolean and never raises.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar, Optional, Union
from uuid import UUID

from jinja2 import Environment, FileSystemLoader

from apps.domain.models import TIERS, Tier, utcnow
from apps.domain.ports.notifications import IEmailSender

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "emails"


class NotificationScenario(str, Enum):
    """Named lifecycle email"""
    REQUEST_RECEIVED = "request_received"
    INSTANT_ANSWER_READY = "instant_answer_ready"
    AI_ANSWER_READY = "ai_answer_ready"
    HUMAN_ANSWER_READY = "human_answer_ready"
    ADMIN_ALERT = "admin_alert"


# ============================================================
# PAYLOADS (one per scenario)
# ============================================================

@dataclass(frozen=True)
class RequestReceived:
    """Expert-tier confirmation sent to the customer"""
    customer_email: str
    customer_name: str
    request_id: UUID

    scenario: ClassVar[NotificationScenario] = NotificationScenario.REQUEST_RECEIVED


@dataclass(frozen=True)
class InstantAnswerReady:
    customer_email: str
    customer_name: str
    topic: str
    response: str

    scenario: ClassVar[NotificationScenario] = NotificationScenario.INSTANT_ANSWER_READY


@dataclass(frozen=True)
class AIAnswerReady:
    customer_email: str
    customer_name: str
    response: str

    scenario: ClassVar[NotificationScenario] = NotificationScenario.AI_ANSWER_READY


@dataclass(frozen=True)
class HumanAnswerReady:
    customer_email: str
    customer_name: str
    response: str

    scenario: ClassVar[NotificationScenario] = NotificationScenario.HUMAN_ANSWER_READY


@dataclass(frozen=True)
class AdminAlert:
    """Staff notification for a newly paid request"""
    request_id: UUID
    customer_name: str
    tier: Tier
    description: str

    scenario: ClassVar[NotificationScenario] = NotificationScenario.ADMIN_ALERT


NotificationPayload = Union[
    RequestReceived, InstantAnswerReady, AIAnswerReady, HumanAnswerReady, AdminAlert
]


@dataclass(frozen=True)
class RenderedEmail:
    to: Optional[str]
    subject: str
    html: str


class NotificationService:
    """
    Formats and dispatches lifecycle emails

    Responsibilities:
    - Pick subject and template per scenario
    - Render HTML with autoescaping
    - Swallow and log delivery failures
    """

    def __init__(
        self,
        sender: IEmailSender,
        admin_email: Optional[str] = None,
        site_url: str = "",
        brand: str = "Kings Advice",
    ):
        """
        Initialize notification service

        Args:
            sender: Email provider adapter
            admin_email: Staff address for admin alerts; alerts are skipped if empty
            site_url: Public site URL used in call-to-action links
            brand: Firm name shown in headers and subjects
        """
        self._sender = sender
        self.admin_email = admin_email or None
        self.site_url = site_url
        self.brand = brand

        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def send(self, payload: NotificationPayload) -> bool:
        """
        Render and deliver one email

        Args:
            payload: Scenario payload

        Returns:
            True if the provider accepted the message, False otherwise
        """
        scenario = payload.scenario

        try:
            email = self.render(payload)
        except Exception as e:
            logger.error(f"Failed to render {scenario.value} email: {e}", exc_info=True)
            return False

        if not email.to:
            logger.info(f"No recipient for {scenario.value} email, skipping")
            return False

        try:
            self._sender.send(to=email.to, subject=email.subject, html=email.html)
        except Exception as e:
            logger.error(
                f"Failed to send {scenario.value} email to {email.to}: {e}",
                extra={"scenario": scenario.value},
            )
            return False

        logger.info(f"Sent {scenario.value} email to {email.to}")
        return True

    def render(self, payload: NotificationPayload) -> RenderedEmail:
        """
        Build recipient, subject and HTML body for a payload

        Returns:
            RenderedEmail; `to` is None for admin alerts without an admin address
        """
        scenario = payload.scenario
        template = self.env.get_template(f"{scenario.value}.html.j2")

        context = {
            "brand": self.brand,
            "site_url": self.site_url,
            "year": utcnow().year,
            "tiers": {tier.value: info for tier, info in TIERS.items()},
            **payload.__dict__,
        }
        html = template.render(**context)

        if isinstance(payload, AdminAlert):
            to = self.admin_email
        else:
            to = payload.customer_email

        return RenderedEmail(to=to, subject=self._subject(payload), html=html)

    def _subject(self, payload: NotificationPayload) -> str:
        """Subject line per scenario"""
        if isinstance(payload, RequestReceived):
            subject = f"Your {Tier.HUMAN_EXPERT.display_name} Request Has Been Received"
        elif isinstance(payload, InstantAnswerReady):
            subject = f"Your {Tier.INSTANT.display_name} Response"
        elif isinstance(payload, AIAnswerReady):
            subject = f"Your {Tier.AI_ASSISTED.display_name} Response"
        elif isinstance(payload, HumanAnswerReady):
            subject = f"Your {Tier.HUMAN_EXPERT.display_name} Response is Ready"
        else:
            subject = f"New {payload.tier.info.label} Request from {payload.customer_name}"

        return f"{subject} - {self.brand}"
