# apps/adapters/repositories/inmemory_repos.py
"""
In-Memory Repository Adapters for testing
"""
from typing import Any, Dict, List, Optional
from uuid import UUID
from copy import deepcopy
from dataclasses import replace
import threading

from apps.domain.models import (
    AdminCredential,
    CannedAnswer,
    ConsultingRequest,
    RequestStatus,
    ValidationError,
    utcnow,
)


class InMemoryRequestRepository:
    """
    In-memory consulting request repository for testing
    """

    def __init__(self):
        self._requests: Dict[UUID, ConsultingRequest] = {}
        self._lock = threading.Lock()

    def create(self, request: ConsultingRequest) -> ConsultingRequest:
        """Save request to memory"""
        with self._lock:
            self._requests[request.id] = deepcopy(request)
        return deepcopy(request)

    def get(self, request_id: UUID) -> Optional[ConsultingRequest]:
        """Get request by ID"""
        return deepcopy(self._requests.get(request_id))

    def list_all(self) -> List[ConsultingRequest]:
        """List requests, newest first"""
        requests = sorted(
            self._requests.values(), key=lambda r: r.created_at, reverse=True
        )
        return [deepcopy(req) for req in requests]

    def update(
            self,
            request_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        """Merge fields into stored request"""
        with self._lock:
            return self._apply(request_id, changes)

    def transition(
            self,
            request_id: UUID,
            expected_status: RequestStatus,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        """Merge fields only if status still matches"""
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != expected_status:
                return None
            return self._apply(request_id, changes)

    def delete(self, request_id: UUID) -> bool:
        """Delete request"""
        with self._lock:
            return self._requests.pop(request_id, None) is not None

    def clear(self):
        """Clear all requests"""
        self._requests.clear()

    def _apply(
            self,
            request_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[ConsultingRequest]:
        current = self._requests.get(request_id)
        if current is None:
            return None
        updated = replace(current, updated_at=utcnow(), **changes)
        self._requests[request_id] = updated
        return deepcopy(updated)


class InMemoryCannedAnswerRepository:
    """
    In-memory canned answer repository for testing
    """

    def __init__(self):
        self._entries: Dict[UUID, CannedAnswer] = {}

    def create(self, entry: CannedAnswer) -> CannedAnswer:
        """Save entry; topics are unique"""
        if self.get_by_topic(entry.topic):
            raise ValidationError(f"A canned answer for '{entry.topic}' already exists")
        self._entries[entry.id] = deepcopy(entry)
        return deepcopy(entry)

    def get(self, entry_id: UUID) -> Optional[CannedAnswer]:
        return deepcopy(self._entries.get(entry_id))

    def get_by_topic(self, topic: str) -> Optional[CannedAnswer]:
        for entry in self._entries.values():
            if entry.topic == topic:
                return deepcopy(entry)
        return None

    def list_all(self) -> List[CannedAnswer]:
        entries = sorted(self._entries.values(), key=lambda e: e.topic)
        return [deepcopy(e) for e in entries]

    def update(
            self,
            entry_id: UUID,
            changes: Dict[str, Any]
    ) -> Optional[CannedAnswer]:
        current = self._entries.get(entry_id)
        if current is None:
            return None

        topic = changes.get("topic")
        if topic is not None:
            existing = self.get_by_topic(topic)
            if existing and existing.id != entry_id:
                raise ValidationError("A canned answer for this topic already exists")

        updated = replace(current, updated_at=utcnow(), **changes)
        self._entries[entry_id] = updated
        return deepcopy(updated)

    def delete(self, entry_id: UUID) -> bool:
        return self._entries.pop(entry_id, None) is not None

    def clear(self):
        """Clear all entries"""
        self._entries.clear()


class InMemoryAdminCredentialRepository:
    """
    In-memory admin credential repository for testing
    """

    def __init__(self):
        self._credentials: Dict[str, AdminCredential] = {}

    def get_by_username(self, username: str) -> Optional[AdminCredential]:
        return deepcopy(self._credentials.get(username))

    def create(self, credential: AdminCredential) -> AdminCredential:
        self._credentials[credential.username] = deepcopy(credential)
        return credential
