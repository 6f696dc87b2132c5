"""
Questions students park for later.

A teacher queues a question, the full answer (text, picture, audio) is
generated in the background, and the entry moves from ``processing`` to
``answered`` or ``error``. Entries can be regenerated or removed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import logging

from src.utils.session_store import SessionStore, utcnow
from .ask_later import AskLaterFlow
from .errors import FlowError

logger = logging.getLogger(__name__)


class QuestionStatus(str, Enum):
    PROCESSING = "processing"
    ANSWERED = "answered"
    ERROR = "error"


@dataclass
class QueuedQuestion:
    id: str
    question: str
    language: str
    status: QuestionStatus = QuestionStatus.PROCESSING
    answer: Optional[str] = None
    image_url: Optional[str] = None
    audio_data_uri: Optional[str] = None
    error: Optional[str] = None
    generation: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


class QuestionQueue:
    def __init__(self, store: Optional[SessionStore[QueuedQuestion]] = None):
        self._store: SessionStore[QueuedQuestion] = store or SessionStore(session_timeout_minutes=24 * 60)

    def enqueue(self, question: str, language: str = "English") -> QueuedQuestion:
        entry = QueuedQuestion(id="", question=question, language=language)
        entry.id = self._store.create(entry)
        return entry

    def get(self, question_id: str) -> Optional[QueuedQuestion]:
        return self._store.get(question_id)

    def list(self) -> List[QueuedQuestion]:
        """Newest first."""
        return list(reversed(self._store.values()))

    def delete(self, question_id: str) -> bool:
        return self._store.delete(question_id)

    def reset(self, question_id: str) -> Optional[QueuedQuestion]:
        """
        Clear a previous answer so the question can be generated again.

        Bumps the generation so an answer still in flight for the old one is dropped.
        """
        entry = self.get(question_id)
        if entry is None:
            return None
        return self._store.update(
            question_id,
            generation=entry.generation + 1,
            status=QuestionStatus.PROCESSING,
            answer=None,
            image_url=None,
            audio_data_uri=None,
            error=None,
            updated_at=utcnow(),
        )

    async def answer(self, question_id: str, flow: AskLaterFlow) -> Optional[QueuedQuestion]:
        entry = self.get(question_id)
        if entry is None:
            return None

        generation = entry.generation
        try:
            result = await flow.run({"question": entry.question, "language": entry.language})
        except FlowError as e:
            logger.error(f"Failed to generate answer for queued question {question_id}: {e}")
            if self._superseded(question_id, generation):
                return self.get(question_id)
            return self._store.update(question_id, status=QuestionStatus.ERROR, error=e.message, updated_at=utcnow())

        if self._superseded(question_id, generation):
            return self.get(question_id)
        return self._store.update(
            question_id,
            status=QuestionStatus.ANSWERED,
            answer=result.answer,
            image_url=result.image_url,
            audio_data_uri=result.audio_data_uri,
            updated_at=utcnow(),
        )

    def _superseded(self, question_id: str, generation: int) -> bool:
        current = self.get(question_id)
        if current is None or current.generation != generation:
            logger.info(f"Discarding stale answer for queued question {question_id}")
            return True
        return False
