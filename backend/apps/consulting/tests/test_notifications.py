# apps/consulting/tests/test_notifications.py
"""
Tests for lifecycle email rendering and delivery
"""
from uuid import uuid4

import pytest

from apps.adapters.email.fake import FakeEmailSender
from apps.domain.models import Tier
from apps.domain.services.notification_service import (
    AdminAlert,
    AIAnswerReady,
    HumanAnswerReady,
    InstantAnswerReady,
    NotificationService,
    RequestReceived,
)


@pytest.fixture
def sender():
    return FakeEmailSender()


@pytest.fixture
def notifier(sender):
    return NotificationService(
        sender=sender,
        admin_email="staff@kingsadvice.test",
        site_url="https://kings.example",
    )


class TestSubjects:

    def test_customer_subjects(self, notifier):
        request_id = uuid4()
        cases = [
            (RequestReceived("a@b.co", "Ann", request_id),
             "Your Expert Review Request Has Been Received - Kings Advice"),
            (InstantAnswerReady("a@b.co", "Ann", "Pricing", "Charge more."),
             "Your Basic Consult Response - Kings Advice"),
            (AIAnswerReady("a@b.co", "Ann", "Advice"),
             "Your AI Analyst Response - Kings Advice"),
            (HumanAnswerReady("a@b.co", "Ann", "Advice"),
             "Your Expert Review Response is Ready - Kings Advice"),
        ]

        for payload, subject in cases:
            email = notifier.render(payload)
            assert email.subject == subject
            assert email.to == "a@b.co"

    def test_admin_alert_subject_and_recipient(self, notifier):
        payload = AdminAlert(
            request_id=uuid4(),
            customer_name="Ann",
            tier=Tier.INSTANT,
            description="Selected Topic: Pricing",
        )

        email = notifier.render(payload)

        assert email.to == "staff@kingsadvice.test"
        assert email.subject == "New Basic Consult ($29) Request from Ann - Kings Advice"
        assert str(payload.request_id) in email.html
        assert "Selected Topic: Pricing" in email.html


class TestRendering:

    def test_customer_input_is_escaped(self, notifier):
        email = notifier.render(
            InstantAnswerReady(
                "a@b.co", "<script>alert(1)</script>", "Pricing", "Charge more."
            )
        )

        assert "<script>" not in email.html
        assert "&lt;script&gt;" in email.html

    def test_upsell_links_to_site(self, notifier):
        email = notifier.render(AIAnswerReady("a@b.co", "Ann", "Advice"))

        assert 'href="https://kings.example"' in email.html
        assert "$499" in email.html

    def test_expert_confirmation_mentions_request_id(self, notifier):
        request_id = uuid4()

        email = notifier.render(RequestReceived("a@b.co", "Ann", request_id))

        assert str(request_id) in email.html
        assert "2-3 business days" in email.html


class TestSend:

    def test_delivers_rendered_email(self, notifier, sender):
        assert notifier.send(HumanAnswerReady("a@b.co", "Ann", "Detailed review")) is True

        assert len(sender.sent) == 1
        assert sender.sent[0].to == "a@b.co"
        assert "Detailed review" in sender.sent[0].html

    def test_provider_failure_returns_false(self, caplog):
        notifier = NotificationService(sender=FakeEmailSender(fail=True))

        assert notifier.send(AIAnswerReady("a@b.co", "Ann", "Advice")) is False
        assert "Failed to send ai_answer_ready email" in caplog.text

    def test_admin_alert_skipped_without_admin_address(self, sender):
        notifier = NotificationService(sender=sender, admin_email="")

        sent = notifier.send(
            AdminAlert(uuid4(), "Ann", Tier.HUMAN_EXPERT, "Review my plan")
        )

        assert sent is False
        assert sender.sent == []
