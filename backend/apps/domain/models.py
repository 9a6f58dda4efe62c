# apps/domain/models.py

"""
Domain Models - Value Objects and Entities

Value Objects: Immutable, defined by attributes (e.g., TierInfo, PaymentSession)
Entities: Have identity, mutable (e.g., ConsultingRequest, CannedAnswer)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tier(str, Enum):
    """Purchasable service level"""
    INSTANT = "instant"
    AI_ASSISTED = "ai_assisted"
    HUMAN_EXPERT = "human_expert"

    @property
    def info(self) -> "TierInfo":
        return TIERS[self]

    @property
    def price(self) -> int:
        return TIERS[self].price

    @property
    def display_name(self) -> str:
        return TIERS[self].display_name

    @classmethod
    def parse(cls, value: str) -> "Tier":
        """
        Convert wire value to Tier

        Raises:
            ValidationError: If value is not a known tier
        """
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Invalid tier: {value}")


class RequestStatus(str, Enum):
    """Request pipeline state"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    REJECTED = "rejected"

    def can_transition_to(self, target: "RequestStatus") -> bool:
        """
        Check the status DAG

        pending -> processing | completed | rejected
        processing -> completed | rejected
        completed, rejected are terminal. Staying in the same status is
        always allowed (e.g. editing a response).
        """
        if target == self:
            return True
        return target in _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]


_TRANSITIONS = {
    RequestStatus.PENDING: frozenset(
        {RequestStatus.PROCESSING, RequestStatus.COMPLETED, RequestStatus.REJECTED}
    ),
    RequestStatus.PROCESSING: frozenset(
        {RequestStatus.COMPLETED, RequestStatus.REJECTED}
    ),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


# ============================================================
# VALUE OBJECTS (Immutable)
# ============================================================

@dataclass(frozen=True)
class TierInfo:
    """Price table entry for a tier"""
    price: int
    display_name: str

    @property
    def price_cents(self) -> int:
        return self.price * 100

    @property
    def label(self) -> str:
        return f"{self.display_name} (${self.price})"


TIERS: Dict[Tier, TierInfo] = {
    Tier.INSTANT: TierInfo(price=29, display_name="Basic Consult"),
    Tier.AI_ASSISTED: TierInfo(price=99, display_name="AI Analyst"),
    Tier.HUMAN_EXPERT: TierInfo(price=499, display_name="Expert Review"),
}

TOPIC_PREFIX = "Selected Topic: "

INSTANT_FALLBACK_RESPONSE = (
    "Thank you for your inquiry. Our standard advice is to focus on clear goal "
    "setting, metric tracking, and consistent execution."
)


def extract_topic(description: str) -> str:
    """Recover the instant-tier topic from a request description"""
    if description.startswith(TOPIC_PREFIX):
        return description[len(TOPIC_PREFIX):].strip()
    return description.strip()


@dataclass(frozen=True)
class PaymentSession:
    """
    Snapshot of a payment processor checkout session

    status is the processor's own value ("open", "complete", "expired")
    or "error" when the processor could not be reached.
    """
    status: str
    customer_email: Optional[str] = None
    request_id: Optional[str] = None
    tier: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.status == "complete"

    @classmethod
    def error(cls) -> "PaymentSession":
        return cls(status="error")


@dataclass(frozen=True)
class CheckoutSession:
    """Client-usable checkout handle for a newly created request"""
    client_secret: str
    request_id: UUID


@dataclass(frozen=True)
class Advice:
    """Result of AI advisor generation"""
    content: str
    method: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_fallback(self) -> bool:
        return self.method == "fallback"


# ============================================================
# ENTITIES (Have Identity, Mutable)
# ============================================================

@dataclass
class ConsultingRequest:
    """
    A paid consulting request

    Entity with identity (id). Status and response change over the
    request lifecycle.
    """
    tier: Tier
    customer_name: str
    customer_email: str
    description: str = ""
    amount: int = 0
    id: UUID = field(default_factory=uuid4)
    status: RequestStatus = RequestStatus.PENDING
    response: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def topic(self) -> str:
        return extract_topic(self.description)

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING


@dataclass
class CannedAnswer:
    """Admin-curated topic -> answer pair used by the instant tier"""
    topic: str
    answer: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class AdminCredential:
    """Operator login; password is stored hashed"""
    username: str
    password_hash: str
    id: UUID = field(default_factory=uuid4)


# ============================================================
# RESULT OBJECTS (Return Types)
# ============================================================

@dataclass(frozen=True)
class SessionStatusResult:
    """
    Result of polling a checkout session

    Base variant: no resolution happened on this call (payment not
    complete, request unknown, or request already past pending).
    """
    session: PaymentSession

    resolution = "none"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.session.status,
            'customerEmail': self.session.customer_email,
            'requestId': self.session.request_id,
            'tier': self.session.tier,
        }


@dataclass(frozen=True)
class InstantResolution(SessionStatusResult):
    """Instant tier resolved on this call; answer is returned inline"""
    topic: str
    response: str

    resolution = "instant"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['topic'] = self.topic
        data['response'] = self.response
        return data


@dataclass(frozen=True)
class DeferredResolution(SessionStatusResult):
    """AI-assisted or human-expert request moved to processing on this call"""
    request_status: RequestStatus

    resolution = "deferred"


# ============================================================
# DOMAIN EXCEPTIONS
# ============================================================

class DomainException(Exception):
    """Base exception for domain layer"""
    pass


class ValidationError(DomainException):
    """Raised when domain validation fails"""
    pass


class NotFoundError(DomainException):
    """Raised when entity not found"""
    pass


class InvalidTransitionError(ValidationError):
    """Raised when a status change would leave the status DAG"""

    def __init__(self, current: RequestStatus, target: RequestStatus):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change status from '{current.value}' to '{target.value}'"
        )


class LLMProviderError(DomainException):
    """Raised when LLM provider fails"""
    pass


class PaymentProviderError(DomainException):
    """Raised when the payment processor rejects or fails a call"""
    pass


class NotificationError(DomainException):
    """Raised when an email could not be handed to the provider"""
    pass
