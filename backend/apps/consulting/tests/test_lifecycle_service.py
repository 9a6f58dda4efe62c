# apps/consulting/tests/test_lifecycle_service.py
"""
Tests for the request lifecycle service using in-memory adapters
"""
from uuid import uuid4

import pytest

from apps.adapters.email.fake import FakeEmailSender
from apps.adapters.llm.fake import FakeLLM
from apps.adapters.payments.fake import FakePaymentGateway
from apps.adapters.repositories.inmemory_repos import (
    InMemoryCannedAnswerRepository,
    InMemoryRequestRepository,
)
from apps.adapters.tasks.inline import InlineTaskRunner
from apps.domain.models import (
    INSTANT_FALLBACK_RESPONSE,
    CannedAnswer,
    DeferredResolution,
    InstantResolution,
    InvalidTransitionError,
    NotFoundError,
    PaymentProviderError,
    PaymentSession,
    RequestStatus,
    SessionStatusResult,
    Tier,
    ValidationError,
)
from apps.domain.prompts.template import PromptTemplate
from apps.domain.services.advisor_service import FALLBACK_HEADER, AdvisorService
from apps.domain.services.lifecycle_service import RequestLifecycleService
from apps.domain.services.notification_service import NotificationService

ADMIN_EMAIL = "staff@kingsadvice.test"


class LifecycleHarness:
    """Service wired to fakes, with handles on every fake"""

    def __init__(self, llm=None, sender=None, gateway=None, resolve_on_submit=False):
        self.requests = InMemoryRequestRepository()
        self.canned = InMemoryCannedAnswerRepository()
        self.gateway = gateway or FakePaymentGateway()
        self.sender = sender or FakeEmailSender()
        self.tasks = InlineTaskRunner()
        self.llm = llm if llm is not None else FakeLLM(response="Grow your margins.")

        self.service = RequestLifecycleService(
            request_repo=self.requests,
            canned_repo=self.canned,
            payment_gateway=self.gateway,
            advisor=AdvisorService(llm=self.llm, prompt_template=PromptTemplate()),
            notifier=NotificationService(sender=self.sender, admin_email=ADMIN_EMAIL),
            task_runner=self.tasks,
            resolve_on_submit=resolve_on_submit,
        )

    def checkout(self, tier, description="", email="ann@example.com", name="Ann"):
        checkout = self.service.open_checkout(
            tier=tier,
            customer_email=email,
            customer_name=name,
            description=description,
            return_url="https://kings.example/payment-complete",
        )
        session_id = checkout.client_secret.replace("_secret", "")
        return checkout, session_id

    def pay(self, tier, description="", **kwargs):
        checkout, session_id = self.checkout(tier, description, **kwargs)
        self.gateway.complete(session_id)
        return checkout, session_id


@pytest.fixture
def harness():
    return LifecycleHarness()


class TestSubmitRequest:
    """Test direct request submission"""

    def test_creates_pending_request(self, harness):
        request = harness.service.submit_request(
            tier=Tier.AI_ASSISTED,
            customer_name="Ann",
            customer_email="ann@example.com",
            description="How do I price my product?",
            amount=99,
        )

        assert request.status == RequestStatus.PENDING
        assert request.response is None
        assert harness.requests.get(request.id).amount == 99
        assert harness.sender.sent == []

    def test_missing_name_rejected(self, harness):
        with pytest.raises(ValidationError):
            harness.service.submit_request(
                tier=Tier.INSTANT,
                customer_name="  ",
                customer_email="ann@example.com",
                description="x",
                amount=29,
            )

        assert harness.requests.list_all() == []

    def test_negative_amount_rejected(self, harness):
        with pytest.raises(ValidationError):
            harness.service.submit_request(
                tier=Tier.INSTANT,
                customer_name="Ann",
                customer_email="ann@example.com",
                description="x",
                amount=-1,
            )

    def test_resolve_on_submit_completes_instant_request(self):
        harness = LifecycleHarness(resolve_on_submit=True)
        harness.canned.create(CannedAnswer(topic="Pricing", answer="Charge more."))

        created = harness.service.submit_request(
            tier=Tier.INSTANT,
            customer_name="Ann",
            customer_email="ann@example.com",
            description="Selected Topic: Pricing",
            amount=29,
        )

        stored = harness.requests.get(created.id)
        assert stored.status == RequestStatus.COMPLETED
        assert stored.response == "Charge more."


class TestOpenCheckout:
    """Test checkout session creation"""

    def test_creates_request_with_tier_price(self, harness):
        checkout, session_id = harness.checkout(Tier.HUMAN_EXPERT, "Review my plan")

        request = harness.requests.get(checkout.request_id)
        assert request.status == RequestStatus.PENDING
        assert request.amount == 499
        assert request.tier == Tier.HUMAN_EXPERT

        opened = harness.gateway.opened[0]
        assert opened["amount_cents"] == 49900
        assert opened["request_id"] == checkout.request_id
        assert opened["customer_name"] == "Ann"

    def test_missing_fields_create_nothing(self, harness):
        with pytest.raises(ValidationError, match="Missing required fields"):
            harness.service.open_checkout(
                tier=Tier.INSTANT,
                customer_email="",
                customer_name="Ann",
                description="",
                return_url="https://kings.example/payment-complete",
            )

        assert harness.requests.list_all() == []
        assert harness.gateway.opened == []

    def test_processor_failure_propagates(self):
        harness = LifecycleHarness(gateway=FakePaymentGateway(fail=True))

        with pytest.raises(PaymentProviderError):
            harness.checkout(Tier.INSTANT, "Selected Topic: Pricing")

        # An unpayable request is not left behind
        assert harness.requests.list_all() == []


class TestInstantResolution:
    """Test pending -> completed for the instant tier"""

    def test_canned_answer_returned_inline(self, harness):
        harness.canned.create(CannedAnswer(topic="Pricing", answer="Charge more."))
        checkout, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Pricing")

        result = harness.service.confirm_payment(session_id)

        assert isinstance(result, InstantResolution)
        assert result.topic == "Pricing"
        assert result.response == "Charge more."
        assert result.to_dict()["response"] == "Charge more."

        stored = harness.requests.get(checkout.request_id)
        assert stored.status == RequestStatus.COMPLETED
        assert stored.response == "Charge more."

    def test_unknown_topic_uses_fallback(self, harness):
        checkout, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Unknown thing")

        result = harness.service.confirm_payment(session_id)

        assert result.response == INSTANT_FALLBACK_RESPONSE
        assert harness.requests.get(checkout.request_id).response == INSTANT_FALLBACK_RESPONSE

    def test_description_without_prefix_is_the_topic(self, harness):
        harness.canned.create(CannedAnswer(topic="Hiring", answer="Hire slowly."))
        _, session_id = harness.pay(Tier.INSTANT, "  Hiring ")

        result = harness.service.confirm_payment(session_id)

        assert result.response == "Hire slowly."

    def test_admin_and_customer_notified(self, harness):
        harness.canned.create(CannedAnswer(topic="Pricing", answer="Charge more."))
        _, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Pricing")

        harness.service.confirm_payment(session_id)

        assert len(harness.sender.sent_to(ADMIN_EMAIL)) == 1
        customer_mail = harness.sender.sent_to("ann@example.com")
        assert len(customer_mail) == 1
        assert "Charge more." in customer_mail[0].html

    def test_second_poll_does_not_resolve_again(self, harness):
        checkout, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Pricing")

        first = harness.service.confirm_payment(session_id)
        harness.canned.create(CannedAnswer(topic="Pricing", answer="Changed later."))
        second = harness.service.confirm_payment(session_id)

        assert isinstance(first, InstantResolution)
        assert type(second) is SessionStatusResult
        assert "response" not in second.to_dict()
        assert harness.requests.get(checkout.request_id).response == INSTANT_FALLBACK_RESPONSE
        assert len(harness.sender.sent) == 2


class TestAIAssistedResolution:
    """Test pending -> processing -> completed for the AI tier"""

    def test_completes_with_llm_answer(self, harness):
        checkout, session_id = harness.pay(Tier.AI_ASSISTED, "How do I grow?")

        result = harness.service.confirm_payment(session_id)

        assert isinstance(result, DeferredResolution)
        assert result.request_status == RequestStatus.PROCESSING

        # Inline runner already ran the detached generation
        stored = harness.requests.get(checkout.request_id)
        assert stored.status == RequestStatus.COMPLETED
        assert stored.response == "Grow your margins."
        assert harness.llm.call_count == 1

        customer_mail = harness.sender.sent_to("ann@example.com")
        assert len(customer_mail) == 1
        assert "Grow your margins." in customer_mail[0].html

    def test_llm_failure_completes_with_fallback(self):
        harness = LifecycleHarness(llm=FakeLLM(error="backend unreachable"))
        checkout, session_id = harness.pay(Tier.AI_ASSISTED, "How do I cut costs?")

        harness.service.confirm_payment(session_id)

        stored = harness.requests.get(checkout.request_id)
        assert stored.status == RequestStatus.COMPLETED
        assert stored.response.startswith(FALLBACK_HEADER)
        assert "Financial Analysis" in stored.response
        assert harness.tasks.failures == []

    def test_rejected_while_processing_is_not_completed(self, harness):
        request = harness.service.submit_request(
            tier=Tier.AI_ASSISTED,
            customer_name="Ann",
            customer_email="ann@example.com",
            description="How do I grow?",
            amount=99,
        )
        harness.requests.update(request.id, {"status": RequestStatus.REJECTED})

        assert harness.service.complete_with_advice(request.id) is None
        assert harness.requests.get(request.id).status == RequestStatus.REJECTED


class TestHumanExpertResolution:
    """Test pending -> processing for the expert tier"""

    def test_moves_to_processing_and_confirms(self, harness):
        checkout, session_id = harness.pay(Tier.HUMAN_EXPERT, "Review my plan")

        result = harness.service.confirm_payment(session_id)

        assert isinstance(result, DeferredResolution)
        stored = harness.requests.get(checkout.request_id)
        assert stored.status == RequestStatus.PROCESSING
        assert stored.response is None

        confirmation = harness.sender.sent_to("ann@example.com")
        assert len(confirmation) == 1
        assert str(checkout.request_id) in confirmation[0].html
        assert len(harness.sender.sent_to(ADMIN_EMAIL)) == 1


class TestConfirmPaymentGuards:
    """Test polls that must not resolve anything"""

    def test_open_session_does_nothing(self, harness):
        checkout, session_id = harness.checkout(Tier.INSTANT, "Selected Topic: Pricing")

        result = harness.service.confirm_payment(session_id)

        assert result.to_dict()["status"] == "open"
        assert harness.requests.get(checkout.request_id).status == RequestStatus.PENDING

    def test_unknown_session_reports_error(self, harness):
        result = harness.service.confirm_payment("cs_missing")

        assert result.to_dict() == {
            "status": "error",
            "customerEmail": None,
            "requestId": None,
            "tier": None,
        }

    def test_session_for_deleted_request(self, harness):
        checkout, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Pricing")
        harness.requests.delete(checkout.request_id)

        result = harness.service.confirm_payment(session_id)

        assert type(result) is SessionStatusResult
        assert harness.sender.sent == []

    def test_invalid_request_id_in_metadata(self, harness):
        harness.gateway.add_session(
            "cs_bad", PaymentSession(status="complete", request_id="not-a-uuid")
        )

        result = harness.service.confirm_payment("cs_bad")

        assert type(result) is SessionStatusResult

    def test_rejected_request_is_not_resolved(self, harness):
        checkout, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Pricing")
        harness.service.admin_update(checkout.request_id, status=RequestStatus.REJECTED)

        result = harness.service.confirm_payment(session_id)

        assert type(result) is SessionStatusResult
        assert harness.requests.get(checkout.request_id).status == RequestStatus.REJECTED


class TestAdminUpdate:
    """Test operator updates along the status DAG"""

    def _expert_request(self, harness):
        checkout, session_id = harness.pay(Tier.HUMAN_EXPERT, "Review my plan")
        harness.service.confirm_payment(session_id)
        harness.sender.clear()
        return checkout.request_id

    def test_completing_expert_request_notifies_once(self, harness):
        request_id = self._expert_request(harness)

        updated = harness.service.admin_update(
            request_id, status=RequestStatus.COMPLETED, response="Detailed review"
        )
        harness.service.admin_update(
            request_id, status=RequestStatus.COMPLETED, response="Detailed review"
        )

        assert updated.status == RequestStatus.COMPLETED
        assert updated.response == "Detailed review"
        assert len(harness.sender.sent_to("ann@example.com")) == 1

    def test_editing_response_renotifies(self, harness):
        request_id = self._expert_request(harness)

        harness.service.admin_update(
            request_id, status=RequestStatus.COMPLETED, response="First draft"
        )
        harness.service.admin_update(request_id, response="Corrected answer")

        mails = harness.sender.sent_to("ann@example.com")
        assert len(mails) == 2
        assert "Corrected answer" in mails[1].html

    def test_response_without_completion_does_not_notify(self, harness):
        request_id = self._expert_request(harness)

        harness.service.admin_update(request_id, response="Work in progress")

        assert harness.sender.sent == []

    def test_completing_without_response_rejected(self, harness):
        request_id = self._expert_request(harness)

        with pytest.raises(ValidationError, match="response is required"):
            harness.service.admin_update(request_id, status=RequestStatus.COMPLETED)

        assert harness.requests.get(request_id).status == RequestStatus.PROCESSING

    def test_terminal_status_cannot_move(self, harness):
        request_id = self._expert_request(harness)
        harness.service.admin_update(request_id, status=RequestStatus.REJECTED)

        with pytest.raises(InvalidTransitionError):
            harness.service.admin_update(request_id, status=RequestStatus.PROCESSING)

    def test_backwards_transition_rejected(self, harness):
        request_id = self._expert_request(harness)

        with pytest.raises(InvalidTransitionError):
            harness.service.admin_update(request_id, status=RequestStatus.PENDING)

    def test_non_expert_completion_sends_no_expert_mail(self, harness):
        request = harness.service.submit_request(
            tier=Tier.AI_ASSISTED,
            customer_name="Ann",
            customer_email="ann@example.com",
            description="How do I grow?",
            amount=99,
        )

        harness.service.admin_update(
            request.id, status=RequestStatus.COMPLETED, response="Manual answer"
        )

        assert harness.sender.sent == []

    def test_ai_completion_between_read_and_write_is_kept(self, harness, monkeypatch):
        request = harness.service.submit_request(
            tier=Tier.AI_ASSISTED,
            customer_name="Ann",
            customer_email="ann@example.com",
            description="How do I grow?",
            amount=99,
        )
        harness.requests.update(request.id, {"status": RequestStatus.PROCESSING})

        read_request = harness.service.get_request
        completed = []

        def read_then_complete(request_id):
            snapshot = read_request(request_id)
            if not completed:
                completed.append(harness.service.complete_with_advice(request_id))
            return snapshot

        monkeypatch.setattr(harness.service, "get_request", read_then_complete)

        with pytest.raises(InvalidTransitionError) as exc_info:
            harness.service.admin_update(request.id, status=RequestStatus.REJECTED)

        assert exc_info.value.current == RequestStatus.COMPLETED
        stored = harness.requests.get(request.id)
        assert stored.status == RequestStatus.COMPLETED
        assert stored.response == "Grow your margins."

    def test_unknown_request(self, harness):
        with pytest.raises(NotFoundError):
            harness.service.admin_update(uuid4(), status=RequestStatus.REJECTED)

    def test_no_changes_returns_original(self, harness):
        request_id = self._expert_request(harness)
        before = harness.requests.get(request_id)

        after = harness.service.admin_update(request_id)

        assert after.updated_at == before.updated_at


class TestNotificationFailures:
    """Email failures never undo a committed transition"""

    def test_failing_sender_still_completes(self):
        harness = LifecycleHarness(sender=FakeEmailSender(fail=True))
        harness.canned.create(CannedAnswer(topic="Pricing", answer="Charge more."))
        checkout, session_id = harness.pay(Tier.INSTANT, "Selected Topic: Pricing")

        result = harness.service.confirm_payment(session_id)

        assert result.response == "Charge more."
        assert harness.requests.get(checkout.request_id).status == RequestStatus.COMPLETED
