import pytest
from unittest.mock import MagicMock
from pydantic import BaseModel

from src.models.manager import ModelManager, TaskConfig
from src.models.providers.base import ModelResponse, MediaResponse

PCM_SAMPLE = b"\x01\x00\x02\x00"


def text_response(content: str) -> ModelResponse:
    return ModelResponse(content=content, raw=None, meta={})


def structured_response(parsed: BaseModel) -> ModelResponse:
    return ModelResponse(content=parsed.model_dump_json(), raw=None, meta={}, parsed=parsed)


def invalid_response(reason: str = "missing field") -> ModelResponse:
    return ModelResponse(content="{}", raw=None, meta={"validation_error": reason})


def image_media(data: bytes = b"png-bytes") -> MediaResponse:
    return MediaResponse(data=data, mime_type="image/png", raw=None, meta={})


def speech_media(data: bytes = PCM_SAMPLE) -> MediaResponse:
    return MediaResponse(data=data, mime_type="audio/pcm", raw=None, meta={})


@pytest.fixture
def model_manager():
    """ModelManager double; tests script call / generate_image / synthesize_speech."""
    manager = MagicMock(spec=ModelManager)
    manager.task_config.return_value = TaskConfig(
        provider="openai",
        model="gpt-4o-mini-tts",
        params={"voice": "alloy", "voices": ["alloy", "echo", "fable"]},
    )
    return manager
