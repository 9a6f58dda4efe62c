# apps/domain/services/knowledge_base_service.py

"""
Knowledge Base Service - Canned Q&A management
"""

import logging
from typing import List, Optional
from uuid import UUID

from apps.domain.models import CannedAnswer, NotFoundError, ValidationError
from apps.domain.ports.repositories import ICannedAnswerRepository

logger = logging.getLogger(__name__)


class KnowledgeBaseService:
    """CRUD over canned answers; topics are unique and trimmed"""

    def __init__(self, canned_repo: ICannedAnswerRepository):
        self._canned_repo = canned_repo

    def list_entries(self) -> List[CannedAnswer]:
        return self._canned_repo.list_all()

    def create_entry(self, topic: str, answer: str) -> CannedAnswer:
        """
        Raises:
            ValidationError: If topic/answer is blank or the topic exists
        """
        topic = self._clean(topic, "Topic")
        answer = self._clean(answer, "Answer")

        if self._canned_repo.get_by_topic(topic):
            raise ValidationError(f"A canned answer for '{topic}' already exists")

        entry = self._canned_repo.create(CannedAnswer(topic=topic, answer=answer))
        logger.info(f"Created canned answer {entry.id} for topic {topic!r}")
        return entry

    def update_entry(
        self,
        entry_id: UUID,
        topic: Optional[str] = None,
        answer: Optional[str] = None,
    ) -> CannedAnswer:
        """
        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If a field is blank or the topic collides
        """
        changes = {}
        if topic is not None:
            changes["topic"] = self._clean(topic, "Topic")
            existing = self._canned_repo.get_by_topic(changes["topic"])
            if existing and existing.id != entry_id:
                raise ValidationError(
                    f"A canned answer for '{changes['topic']}' already exists"
                )
        if answer is not None:
            changes["answer"] = self._clean(answer, "Answer")

        if not changes:
            entry = self._canned_repo.get(entry_id)
        else:
            entry = self._canned_repo.update(entry_id, changes)

        if entry is None:
            raise NotFoundError("Question not found")
        return entry

    def delete_entry(self, entry_id: UUID) -> bool:
        return self._canned_repo.delete(entry_id)

    @staticmethod
    def _clean(value: str, label: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError(f"{label} is required")
        return value
