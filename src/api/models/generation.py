"""
API models for the content generation endpoints.

Requests are the flow input models themselves; responses wrap the flow
outputs in the common APIResponse envelope.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .common import APIResponse
from src.flows.types import (
    KnowledgeOutput, LessonPlanOutput, WorksheetOutput, HyperlocalOutput, VisualAidOutput,
    SpeechOutput, AskLaterOutput, RolePlayScriptOutput, RolePlayAudioOutput,
)


class KnowledgeResponse(APIResponse):
    data: Optional[KnowledgeOutput] = None

class LessonPlanResponse(APIResponse):
    data: Optional[LessonPlanOutput] = None

class WorksheetResponse(APIResponse):
    data: Optional[WorksheetOutput] = None

class HyperlocalResponse(APIResponse):
    data: Optional[HyperlocalOutput] = None

class VisualAidResponse(APIResponse):
    data: Optional[VisualAidOutput] = None

class SpeechResponse(APIResponse):
    data: Optional[SpeechOutput] = None

class AskLaterResponse(APIResponse):
    data: Optional[AskLaterOutput] = None

class RolePlayScriptResponse(APIResponse):
    data: Optional[RolePlayScriptOutput] = None

class RolePlayAudioResponse(APIResponse):
    data: Optional[RolePlayAudioOutput] = None


class ImageSearchRequest(BaseModel):
    query: str = Field(..., min_length=2, description="Image search query")

    class Config:
        json_schema_extra = {"example": {"query": "water cycle diagram"}}

class ImageSearchData(BaseModel):
    url: str = Field(..., description="Web image search link to open in a new tab")

class ImageSearchResponse(APIResponse):
    data: Optional[ImageSearchData] = None
