# apps/domain/ports/repositories.py

"""
Repository Ports - Interfaces for data persistence

These ports define contracts for accessing stored data.
"""

from typing import Any, Dict, List, Optional, Protocol
from uuid import UUID

from apps.domain.models import (
    AdminCredential,
    CannedAnswer,
    ConsultingRequest,
    RequestStatus,
)


class IRequestRepository(Protocol):
    """
    Interface for consulting request persistence

    Only single-row atomicity is expected from implementations.
    """

    def create(self, request: ConsultingRequest) -> ConsultingRequest:
        """
        Persist a new request

        Args:
            request: Domain object; status defaults to pending

        Returns:
            Stored request with timestamps populated by the store
        """
        ...

    def get(self, request_id: UUID) -> Optional[ConsultingRequest]:
        """
        Retrieve a request by ID

        Returns:
            ConsultingRequest if found, None otherwise
        """
        ...

    def list_all(self) -> List[ConsultingRequest]:
        """
        Get every request

        Returns:
            Requests ordered by created_at (newest first)
        """
        ...

    def update(
            self,
            request_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        """
        Merge fields into a request and refresh updated_at

        Args:
            request_id: UUID of the request
            changes: Field name -> new value (status, response, ...)

        Returns:
            Updated request, or None if not found
        """
        ...

    def transition(
            self,
            request_id: UUID,
            expected_status: RequestStatus,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        """
        Conditionally update a request

        The update is applied only when the stored status still equals
        expected_status, as one atomic statement.

        Returns:
            Updated request, or None if not found or status differed
        """
        ...

    def delete(self, request_id: UUID) -> bool:
        """
        Delete a request

        Returns:
            True if deleted, False if not found
        """
        ...


class ICannedAnswerRepository(Protocol):
    """
    Interface for canned Q&A persistence
    """

    def create(self, entry: CannedAnswer) -> CannedAnswer:
        """
        Persist a new entry

        Raises:
            ValidationError: If the topic already exists
        """
        ...

    def get(self, entry_id: UUID) -> Optional[CannedAnswer]:
        """Retrieve an entry by ID"""
        ...

    def get_by_topic(self, topic: str) -> Optional[CannedAnswer]:
        """
        Exact topic lookup used by the instant tier

        Returns:
            CannedAnswer if a topic matches exactly, None otherwise
        """
        ...

    def list_all(self) -> List[CannedAnswer]:
        """
        Get every entry

        Returns:
            Entries ordered by topic
        """
        ...

    def update(
            self,
            entry_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[CannedAnswer]:
        """
        Merge fields into an entry

        Raises:
            ValidationError: If the new topic collides with another entry
        """
        ...

    def delete(self, entry_id: UUID) -> bool:
        """Delete an entry; True if it existed"""
        ...


class IAdminCredentialRepository(Protocol):
    """
    Interface for operator credentials
    """

    def get_by_username(self, username: str) -> Optional[AdminCredential]:
        ...

    def create(self, credential: AdminCredential) -> AdminCredential:
        ...
