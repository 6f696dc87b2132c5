"""
API models for the ask-later question queue.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .common import APIResponse
from src.flows.ask_later_queue import QueuedQuestion, QuestionStatus


class QueueQuestionRequest(BaseModel):
    """A question a student asked that the teacher wants answered later."""
    question: str = Field(..., min_length=5, description="The student question")
    language: str = Field("English", description="Language for the answer")

    class Config:
        json_schema_extra = {
            "example": {"question": "Why is the sky blue?", "language": "English"}
        }

class QueuedQuestionData(BaseModel):
    id: str
    question: str
    language: str
    status: QuestionStatus
    answer: Optional[str] = None
    image_url: Optional[str] = None
    audio_data_uri: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entry(cls, entry: QueuedQuestion) -> "QueuedQuestionData":
        return cls(
            id=entry.id,
            question=entry.question,
            language=entry.language,
            status=entry.status,
            answer=entry.answer,
            image_url=entry.image_url,
            audio_data_uri=entry.audio_data_uri,
            error=entry.error,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )

class QueuedQuestionResponse(APIResponse):
    data: Optional[QueuedQuestionData] = None

class QuestionQueueResponse(APIResponse):
    data: List[QueuedQuestionData] = Field(default_factory=list)
