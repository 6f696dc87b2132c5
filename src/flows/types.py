"""
Input/output shapes for the generation flows, plus the JSON schemas the
text model is asked to fill.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from src.utils.image_converter import parse_data_uri


# Flow inputs
class KnowledgeInput(BaseModel):
    question: str = Field(..., min_length=1, description="The question asked by the student")
    language: str = Field(..., min_length=1, description="Language of the question and desired answer")

class LessonPlanInput(BaseModel):
    weekly_syllabus: str = Field(..., min_length=1, description="Weekly syllabus or topics list")

class WorksheetInput(BaseModel):
    textbook_page_photo_data_uri: str = Field(
        ...,
        description="Photo of a textbook page as 'data:<mimetype>;base64,<encoded_data>'"
    )

    @field_validator("textbook_page_photo_data_uri")
    @classmethod
    def _must_be_image_data_uri(cls, value: str) -> str:
        mime_type, _ = parse_data_uri(value)
        if not mime_type.startswith("image/"):
            raise ValueError(f"Expected an image data URI, got '{mime_type}'")
        return value

class HyperlocalInput(BaseModel):
    prompt: str = Field(..., min_length=1, description="Story prompt in the local language")
    language: str = Field(..., min_length=1, description="The local language of the prompt")

class VisualAidInput(BaseModel):
    prompt: str = Field(..., min_length=5, description="What the sketch should show")

class SpeechInput(BaseModel):
    text: str = Field(..., min_length=1, description="Text to speak")

class AskLaterInput(BaseModel):
    question: str = Field(..., min_length=1, description="The student question to be answered")
    language: str = Field("English", description="Language for the answer")

class RolePlayScriptInput(BaseModel):
    topic: str = Field(..., min_length=1, description="Main topic or learning objective")
    language: str = Field(..., min_length=1, description="Language for the script")
    characters: Optional[str] = Field(None, description="Comma-separated characters, e.g. 'Cashier, Customer'")
    setting: Optional[str] = Field(None, description="Context for the role-play, e.g. 'At a grocery store'")

class RolePlayAudioInput(BaseModel):
    script: str = Field(..., min_length=1, description="Markdown role-play script")


# Flow outputs
class KnowledgeOutput(BaseModel):
    answer: str

class LessonPlanOutput(BaseModel):
    lesson_plan: str

class WorksheetOutput(BaseModel):
    easy_worksheet: str
    intermediate_worksheet: str
    advanced_worksheet: str

class HyperlocalOutput(BaseModel):
    story: str
    image_url: str

class VisualAidOutput(BaseModel):
    media_url: str

class SpeechOutput(BaseModel):
    audio_data_uri: str

class AskLaterOutput(BaseModel):
    answer: str
    image_url: str
    audio_data_uri: str

class RolePlayScriptOutput(BaseModel):
    script: str

class RolePlayAudioOutput(BaseModel):
    audio_data_uri: Optional[str] = None


# Model-facing schemas
class AnswerSchema(BaseModel):
    answer: str

class StorySchema(BaseModel):
    story: str

class VisualPromptSchema(BaseModel):
    visual_prompt: str
