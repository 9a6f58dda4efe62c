# apps/adapters/repositories/django_repos.py
"""
Django ORM Repository Adapters

Implements repository ports using Django models.
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.domain.models import (
    AdminCredential,
    CannedAnswer,
    ConsultingRequest,
    RequestStatus,
    Tier,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _to_columns(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Unwrap enum values for the ORM"""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in changes.items()
    }


class DjangoRequestRepository:
    """
    Consulting request repository using Django ORM

    Wraps the ConsultingRequest model with the domain interface.
    """

    def create(self, request: ConsultingRequest) -> ConsultingRequest:
        """
        Insert request row

        Args:
            request: Domain ConsultingRequest

        Returns:
            Stored request with database timestamps
        """
        from apps.consulting.models import ConsultingRequest as ORMRequest

        orm_request = ORMRequest.objects.create(
            id=request.id,
            tier=request.tier.value,
            status=request.status.value,
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            description=request.description,
            response=request.response,
            amount=request.amount,
        )
        return self._to_domain(orm_request)

    def get(self, request_id: UUID) -> Optional[ConsultingRequest]:
        """
        Get request by ID

        Returns:
            ConsultingRequest or None if not found
        """
        from apps.consulting.models import ConsultingRequest as ORMRequest

        try:
            return self._to_domain(ORMRequest.objects.get(id=request_id))
        except ORMRequest.DoesNotExist:
            return None

    def list_all(self) -> List[ConsultingRequest]:
        """List requests, newest first"""
        from apps.consulting.models import ConsultingRequest as ORMRequest

        queryset = ORMRequest.objects.order_by('-created_at')
        return [self._to_domain(req) for req in queryset]

    def update(
            self,
            request_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        """
        Merge fields with a single UPDATE statement

        Returns:
            Updated request or None if not found
        """
        from apps.consulting.models import ConsultingRequest as ORMRequest

        updated = ORMRequest.objects.filter(id=request_id).update(
            updated_at=timezone.now(), **_to_columns(changes)
        )
        if not updated:
            return None
        return self.get(request_id)

    def transition(
            self,
            request_id: UUID,
            expected_status: RequestStatus,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        """
        Compare-and-swap on status

        The WHERE clause carries the expected status, so two concurrent
        callers cannot both claim the same pending row.

        Returns:
            Updated request, or None if not found or status differed
        """
        from apps.consulting.models import ConsultingRequest as ORMRequest

        updated = ORMRequest.objects.filter(
            id=request_id, status=expected_status.value
        ).update(updated_at=timezone.now(), **_to_columns(changes))

        if not updated:
            return None
        return self.get(request_id)

    def delete(self, request_id: UUID) -> bool:
        """
        Delete request

        Returns:
            True if deleted, False if not found
        """
        from apps.consulting.models import ConsultingRequest as ORMRequest

        deleted, _ = ORMRequest.objects.filter(id=request_id).delete()
        return deleted > 0

    def _to_domain(self, orm_request) -> ConsultingRequest:
        """Convert ORM model to domain model"""
        return ConsultingRequest(
            id=orm_request.id,
            tier=Tier(orm_request.tier),
            status=RequestStatus(orm_request.status),
            customer_name=orm_request.customer_name,
            customer_email=orm_request.customer_email,
            description=orm_request.description,
            response=orm_request.response,
            amount=orm_request.amount,
            created_at=orm_request.created_at,
            updated_at=orm_request.updated_at,
        )


class DjangoCannedAnswerRepository:
    """
    Canned answer repository using Django ORM
    """

    def create(self, entry: CannedAnswer) -> CannedAnswer:
        from apps.consulting.models import CannedAnswer as ORMCannedAnswer

        try:
            with transaction.atomic():
                orm_entry = ORMCannedAnswer.objects.create(
                    id=entry.id, topic=entry.topic, answer=entry.answer
                )
        except IntegrityError as e:
            logger.warning(f"Duplicate canned answer topic {entry.topic!r}: {e}")
            raise ValidationError(f"A canned answer for '{entry.topic}' already exists")

        return self._to_domain(orm_entry)

    def get(self, entry_id: UUID) -> Optional[CannedAnswer]:
        from apps.consulting.models import CannedAnswer as ORMCannedAnswer

        orm_entry = ORMCannedAnswer.objects.filter(id=entry_id).first()
        return self._to_domain(orm_entry) if orm_entry else None

    def get_by_topic(self, topic: str) -> Optional[CannedAnswer]:
        from apps.consulting.models import CannedAnswer as ORMCannedAnswer

        orm_entry = ORMCannedAnswer.objects.filter(topic=topic).first()
        return self._to_domain(orm_entry) if orm_entry else None

    def list_all(self) -> List[CannedAnswer]:
        from apps.consulting.models import CannedAnswer as ORMCannedAnswer

        return [self._to_domain(e) for e in ORMCannedAnswer.objects.order_by('topic')]

    def update(
            self,
            entry_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[CannedAnswer]:
        from apps.consulting.models import CannedAnswer as ORMCannedAnswer

        try:
            with transaction.atomic():
                updated = ORMCannedAnswer.objects.filter(id=entry_id).update(
                    updated_at=timezone.now(), **changes
                )
        except IntegrityError as e:
            logger.warning(f"Duplicate canned answer topic on update: {e}")
            raise ValidationError("A canned answer for this topic already exists")

        if not updated:
            return None
        return self.get(entry_id)

    def delete(self, entry_id: UUID) -> bool:
        from apps.consulting.models import CannedAnswer as ORMCannedAnswer

        deleted, _ = ORMCannedAnswer.objects.filter(id=entry_id).delete()
        return deleted > 0

    def _to_domain(self, orm_entry) -> CannedAnswer:
        """Convert ORM model to domain model"""
        return CannedAnswer(
            id=orm_entry.id,
            topic=orm_entry.topic,
            answer=orm_entry.answer,
            created_at=orm_entry.created_at,
            updated_at=orm_entry.updated_at,
        )


class DjangoAdminCredentialRepository:
    """
    Admin credential repository using Django ORM
    """

    def get_by_username(self, username: str) -> Optional[AdminCredential]:
        from apps.consulting.models import AdminCredential as ORMAdminCredential

        orm_admin = ORMAdminCredential.objects.filter(username=username).first()
        if orm_admin is None:
            return None
        return AdminCredential(
            id=orm_admin.id,
            username=orm_admin.username,
            password_hash=orm_admin.password,
        )

    def create(self, credential: AdminCredential) -> AdminCredential:
        from apps.consulting.models import AdminCredential as ORMAdminCredential

        ORMAdminCredential.objects.create(
            id=credential.id,
            username=credential.username,
            password=credential.password_hash,
        )
        return credential
