# apps/domain/services/lifecycle_service.py

"""
Request Lifecycle Service - Orchestrates the consulting request pipeline

This service moves a request through pending -> processing -> completed
(or rejected) and triggers the side effects of each transition: canned
answer lookup, AI generation and notification emails.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from apps.domain.models import (
    INSTANT_FALLBACK_RESPONSE,
    CheckoutSession,
    ConsultingRequest,
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
from apps.domain.ports.payments import IPaymentGateway
from apps.domain.ports.repositories import ICannedAnswerRepository, IRequestRepository
from apps.domain.ports.tasks import ITaskRunner
from apps.domain.services.advisor_service import AdvisorService
from apps.domain.services.notification_service import (
    AdminAlert,
    AIAnswerReady,
    HumanAnswerReady,
    InstantAnswerReady,
    NotificationPayload,
    NotificationService,
    RequestReceived,
)

logger = logging.getLogger(__name__)


class RequestLifecycleService:
    """
    Lifecycle handler for consulting requests

    Responsibilities:
    - Create requests and open checkout sessions
    - Resolve a request once its payment completes (exactly once per request)
    - Apply admin updates along the status DAG
    - Dispatch notifications as detached tasks
    """

    def __init__(
        self,
        request_repo: IRequestRepository,
        canned_repo: ICannedAnswerRepository,
        payment_gateway: Optional[IPaymentGateway],
        advisor: AdvisorService,
        notifier: NotificationService,
        task_runner: ITaskRunner,
        resolve_on_submit: bool = False,
    ):
        """
        Initialize lifecycle service

        Args:
            request_repo: Request persistence
            canned_repo: Canned answer lookup for the instant tier
            payment_gateway: Checkout session provider, None if unconfigured
            advisor: AI answer generation with fallback
            notifier: Lifecycle email dispatch
            task_runner: Runner for detached side effects
            resolve_on_submit: Resolve tiers at submission time instead of
                waiting for payment confirmation
        """
        self._request_repo = request_repo
        self._canned_repo = canned_repo
        self._payment_gateway = payment_gateway
        self._advisor = advisor
        self._notifier = notifier
        self._task_runner = task_runner
        self.resolve_on_submit = resolve_on_submit

    # ============================================================
    # SUBMISSION & CHECKOUT
    # ============================================================

    def submit_request(
        self,
        tier: Tier,
        customer_name: str,
        customer_email: str,
        description: str,
        amount: int,
    ) -> ConsultingRequest:
        """
        Create a pending request

        Args:
            tier: Service tier
            customer_name: Customer's name
            customer_email: Customer's email
            description: Question, or "Selected Topic: <topic>" for instant tier
            amount: Paid amount in whole currency units

        Returns:
            The stored request as created (status pending)

        Raises:
            ValidationError: If required fields are missing
        """
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")
        if not customer_email or not customer_email.strip():
            raise ValidationError("Customer email is required")
        if amount < 0:
            raise ValidationError("Amount cannot be negative")

        request = self._request_repo.create(
            ConsultingRequest(
                tier=tier,
                customer_name=customer_name.strip(),
                customer_email=customer_email.strip(),
                description=description or "",
                amount=amount,
            )
        )
        logger.info(f"Created {tier.value} request {request.id}")

        if self.resolve_on_submit:
            self.resolve(request)

        return request

    def open_checkout(
        self,
        tier: Tier,
        customer_email: str,
        customer_name: str,
        description: str,
        return_url: str,
    ) -> CheckoutSession:
        """
        Create a pending request and a payment session for it

        Args:
            tier: Service tier; the amount comes from the price table
            customer_email: Customer's email
            customer_name: Customer's name
            description: Question or selected topic
            return_url: Page the processor redirects to after payment

        Returns:
            CheckoutSession with the widget client secret and the new request id

        Raises:
            ValidationError: If fields are missing
            PaymentProviderError: If the processor rejects the session
        """
        customer_name = (customer_name or "").strip()
        customer_email = (customer_email or "").strip()
        if not customer_name or not customer_email:
            raise ValidationError("Missing required fields")
        if self._payment_gateway is None:
            raise PaymentProviderError("Payment processor is not configured")

        request = self._request_repo.create(
            ConsultingRequest(
                tier=tier,
                customer_name=customer_name,
                customer_email=customer_email,
                description=description or "",
                amount=tier.price,
            )
        )

        try:
            client_secret = self._payment_gateway.open_session(
                tier=tier,
                customer_email=request.customer_email,
                customer_name=request.customer_name,
                request_id=request.id,
                return_url=return_url,
            )
        except PaymentProviderError:
            # No session means the request can never be paid
            self._request_repo.delete(request.id)
            logger.warning(f"Discarded request {request.id} after checkout failure")
            raise

        logger.info(f"Opened checkout for {tier.value} request {request.id}")

        return CheckoutSession(client_secret=client_secret, request_id=request.id)

    def confirm_payment(self, session_id: str) -> SessionStatusResult:
        """
        Poll a checkout session and resolve its request on first completion

        Repeated polls are idempotent: only a request still in pending is
        resolved, and the claim is an atomic conditional update.

        Args:
            session_id: Processor session identifier

        Returns:
            InstantResolution, DeferredResolution, or the plain
            SessionStatusResult when nothing was resolved on this call
        """
        if self._payment_gateway is None:
            logger.error("Payment processor is not configured, cannot poll session")
            return SessionStatusResult(session=PaymentSession.error())

        session = self._payment_gateway.poll_session(session_id)

        if not session.is_complete or not session.request_id:
            return SessionStatusResult(session=session)

        try:
            request_id = UUID(str(session.request_id))
        except ValueError:
            logger.error(f"Session {session_id} carries invalid request id {session.request_id!r}")
            return SessionStatusResult(session=session)

        request = self._request_repo.get(request_id)
        if request is None:
            logger.warning(f"Session {session_id} references unknown request {request_id}")
            return SessionStatusResult(session=session)

        if not request.is_pending:
            logger.debug(f"Request {request_id} already {request.status.value}, skipping")
            return SessionStatusResult(session=session)

        return self.resolve(request, session=session)

    # ============================================================
    # TIER RESOLUTION
    # ============================================================

    def resolve(
        self,
        request: ConsultingRequest,
        session: Optional[PaymentSession] = None,
    ) -> SessionStatusResult:
        """
        Run the tier-specific resolution path for a pending request

        Args:
            request: Request expected to be pending
            session: Payment session that triggered resolution, if any

        Returns:
            Tagged resolution result
        """
        session = session or PaymentSession(
            status="complete",
            customer_email=request.customer_email,
            request_id=str(request.id),
            tier=request.tier.value,
        )

        if request.tier == Tier.INSTANT:
            return self._resolve_instant(request, session)
        elif request.tier == Tier.AI_ASSISTED:
            return self._resolve_ai_assisted(request, session)
        else:
            return self._resolve_human_expert(request, session)

    def _resolve_instant(
        self, request: ConsultingRequest, session: PaymentSession
    ) -> SessionStatusResult:
        """pending -> completed with a canned answer"""
        topic = request.topic
        entry = self._canned_repo.get_by_topic(topic)

        if entry:
            response = entry.answer
        else:
            logger.info(f"No canned answer for topic {topic!r}, using fallback")
            response = INSTANT_FALLBACK_RESPONSE

        updated = self._request_repo.transition(
            request.id,
            RequestStatus.PENDING,
            {"status": RequestStatus.COMPLETED, "response": response},
        )
        if updated is None:
            logger.info(f"Request {request.id} was claimed concurrently, skipping")
            return SessionStatusResult(session=session)

        self._notify(self._admin_alert(updated))
        self._notify(
            InstantAnswerReady(
                customer_email=updated.customer_email,
                customer_name=updated.customer_name,
                topic=topic,
                response=response,
            )
        )

        return InstantResolution(session=session, topic=topic, response=response)

    def _resolve_ai_assisted(
        self, request: ConsultingRequest, session: PaymentSession
    ) -> SessionStatusResult:
        """pending -> processing now, -> completed in a detached task"""
        updated = self._request_repo.transition(
            request.id,
            RequestStatus.PENDING,
            {"status": RequestStatus.PROCESSING},
        )
        if updated is None:
            logger.info(f"Request {request.id} was claimed concurrently, skipping")
            return SessionStatusResult(session=session)

        self._notify(self._admin_alert(updated))
        self._task_runner.submit(
            self.complete_with_advice, updated.id, name=f"advice:{updated.id}"
        )

        return DeferredResolution(session=session, request_status=updated.status)

    def _resolve_human_expert(
        self, request: ConsultingRequest, session: PaymentSession
    ) -> SessionStatusResult:
        """pending -> processing; completion waits for an admin response"""
        updated = self._request_repo.transition(
            request.id,
            RequestStatus.PENDING,
            {"status": RequestStatus.PROCESSING},
        )
        if updated is None:
            logger.info(f"Request {request.id} was claimed concurrently, skipping")
            return SessionStatusResult(session=session)

        self._notify(
            RequestReceived(
                customer_email=updated.customer_email,
                customer_name=updated.customer_name,
                request_id=updated.id,
            )
        )
        self._notify(self._admin_alert(updated))

        return DeferredResolution(session=session, request_status=updated.status)

    def complete_with_advice(self, request_id: UUID) -> Optional[ConsultingRequest]:
        """
        Generate the AI answer and complete a processing request

        Runs as a detached task. The advisor never raises, so a processing
        request always ends up completed unless an admin moved it first.

        Returns:
            The completed request, or None if it was no longer processing
        """
        request = self._request_repo.get(request_id)
        if request is None:
            logger.warning(f"Request {request_id} disappeared before AI generation")
            return None

        advice = self._advisor.advise(request.customer_name, request.description)
        if advice.is_fallback:
            logger.warning(
                f"Request {request_id} answered with fallback "
                f"({advice.metadata.get('category')})"
            )

        updated = self._request_repo.transition(
            request_id,
            RequestStatus.PROCESSING,
            {"status": RequestStatus.COMPLETED, "response": advice.content},
        )
        if updated is None:
            logger.info(f"Request {request_id} left processing during AI generation")
            return None

        self._notify(
            AIAnswerReady(
                customer_email=updated.customer_email,
                customer_name=updated.customer_name,
                response=advice.content,
            )
        )
        return updated

    # ============================================================
    # ADMIN OPERATIONS
    # ============================================================

    def get_request(self, request_id: UUID) -> ConsultingRequest:
        """
        Raises:
            NotFoundError: If request doesn't exist
        """
        request = self._request_repo.get(request_id)
        if request is None:
            raise NotFoundError("Request not found")
        return request

    def list_requests(self) -> List[ConsultingRequest]:
        return self._request_repo.list_all()

    def delete_request(self, request_id: UUID) -> bool:
        deleted = self._request_repo.delete(request_id)
        if deleted:
            logger.info(f"Deleted request {request_id}")
        return deleted

    def admin_update(
        self,
        request_id: UUID,
        status: Optional[RequestStatus] = None,
        response: Optional[str] = None,
    ) -> ConsultingRequest:
        """
        Apply an operator's status/response change

        The expert-response email is sent only when the request is
        human-expert, a response is supplied, the resulting status is
        completed and the response differs from the stored one.

        Args:
            request_id: Request to update
            status: New status, if changing
            response: New response text, if changing

        Returns:
            Updated request

        Raises:
            NotFoundError: If request doesn't exist
            InvalidTransitionError: If the status change leaves the DAG
            ValidationError: If completing without any response
        """
        original = self.get_request(request_id)

        changes: Dict[str, Any] = {}
        if status is not None:
            if not original.status.can_transition_to(status):
                raise InvalidTransitionError(original.status, status)
            changes["status"] = status
        if response is not None:
            changes["response"] = response

        resulting_status = status or original.status
        resulting_response = response if response is not None else original.response
        if resulting_status == RequestStatus.COMPLETED and not resulting_response:
            raise ValidationError("A response is required to complete a request")

        if not changes:
            return original

        sends_expert_response = (
            original.tier == Tier.HUMAN_EXPERT
            and bool(response)
            and resulting_status == RequestStatus.COMPLETED
            and original.response != response
        )

        # Conditional on the status the checks above ran against
        updated = self._request_repo.transition(request_id, original.status, changes)
        if updated is None:
            current = self.get_request(request_id)
            logger.warning(
                f"Request {request_id} moved to {current.status.value} during admin update"
            )
            raise InvalidTransitionError(current.status, resulting_status)

        logger.info(
            f"Admin updated request {request_id}: "
            f"{original.status.value} -> {updated.status.value}"
        )

        if sends_expert_response:
            logger.info(f"Sending expert response notification to {updated.customer_email}")
            self._notify(
                HumanAnswerReady(
                    customer_email=updated.customer_email,
                    customer_name=updated.customer_name,
                    response=updated.response,
                )
            )

        return updated

    # ============================================================
    # HELPERS
    # ============================================================

    def _admin_alert(self, request: ConsultingRequest) -> AdminAlert:
        return AdminAlert(
            request_id=request.id,
            customer_name=request.customer_name,
            tier=request.tier,
            description=request.description,
        )

    def _notify(self, payload: NotificationPayload) -> None:
        """Send an email as a detached task"""
        self._task_runner.submit(
            self._notifier.send, payload, name=f"email:{payload.scenario.value}"
        )
