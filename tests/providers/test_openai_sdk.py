import base64
import pytest
import httpx
from unittest.mock import Mock, patch
from pydantic import BaseModel
from openai import APIStatusError, APITimeoutError

from src.models.providers.openai_sdk import OpenAIProvider
from src.models.providers.base import (
    ChatRequest, ImageRequest, SpeechRequest, ModelError, ModelBusy, ModelTimeout,
)

OPENAI_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class AnswerSchema(BaseModel):
    answer: str


def status_error(status_code: int, message: str) -> APIStatusError:
    response = httpx.Response(status_code, request=OPENAI_REQUEST)
    return APIStatusError(message, response=response, body=None)


def completion(content: str) -> Mock:
    choice = Mock()
    choice.message.content = content
    choice.finish_reason = "stop"
    response = Mock()
    response.choices = [choice]
    response.model = "gpt-4o-mini"
    response.usage = None
    response.id = "chatcmpl-1"
    return response


class TestOpenAIProvider:
    """Test suite for the OpenAI-compatible provider"""

    @pytest.fixture
    def provider(self):
        with patch('src.models.providers.openai_sdk.OpenAI'):
            return OpenAIProvider(api_key="test-key", timeout=30)

    @pytest.fixture
    def mock_client(self, provider):
        return provider.client

    def test_client_never_retries(self):
        """
        Test: Client construction
        How: Patch the OpenAI class and inspect its kwargs
        Ensures: Busy responses are surfaced immediately instead of retried
        """
        with patch('src.models.providers.openai_sdk.OpenAI') as mock_openai:
            OpenAIProvider(base_url="https://example.test/v1", api_key="k", timeout=12)

        kwargs = mock_openai.call_args[1]
        assert kwargs["max_retries"] == 0
        assert kwargs["timeout"] == 12
        assert kwargs["base_url"] == "https://example.test/v1"

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        with patch('src.models.providers.openai_sdk.OpenAI') as mock_openai:
            OpenAIProvider(api_key_env="GEMINI_API_KEY")

        assert mock_openai.call_args[1]["api_key"] == "from-env"

    def test_chat_with_schema(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion('{"answer": "Like a river"}')

        response = provider.chat(ChatRequest(
            model="gpt-4o-mini",
            messages=[{"role": "user", "content": "Explain current"}],
            params={"temperature": 0.2},
            schema=AnswerSchema,
        ))

        kwargs = mock_client.chat.completions.create.call_args[1]
        assert kwargs["temperature"] == 0.2
        assert kwargs["response_format"]["type"] == "json_schema"
        assert kwargs["response_format"]["json_schema"]["schema"] == AnswerSchema.model_json_schema()
        assert response.parsed.answer == "Like a river"
        assert response.meta["finish_reason"] == "stop"

    def test_chat_validation_error_recorded(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion("not json")

        response = provider.chat(ChatRequest(
            model="gpt-4o-mini",
            messages=[{"role": "user", "content": "Explain"}],
            schema=AnswerSchema,
        ))

        assert response.parsed is None
        assert "validation_error" in response.meta

    def test_chat_data_uri_image(self, provider, mock_client):
        """
        Test: Data URI images keep their own mime type
        How: Send a jpeg data URI and inspect the content array
        Ensures: Photos uploaded by the browser reach the model unchanged
        """
        mock_client.chat.completions.create.return_value = completion("ok")
        payload = base64.b64encode(b"jpeg-bytes").decode()

        provider.chat(ChatRequest(
            model="gpt-4o",
            messages=[{"role": "system", "content": "sys"}, {"role": "user", "content": "Read this page"}],
            images=[f"data:image/jpeg;base64,{payload}"],
        ))

        messages = mock_client.chat.completions.create.call_args[1]["messages"]
        assert messages[0] == {"role": "system", "content": "sys"}
        content = messages[1]["content"]
        assert content[0] == {"type": "text", "text": "Read this page"}
        assert content[1]["image_url"]["url"] == f"data:image/jpeg;base64,{payload}"

    @pytest.mark.parametrize("error,expected", [
        (status_error(503, "Service Unavailable"), ModelBusy),
        (status_error(429, "Too Many Requests"), ModelBusy),
        (status_error(500, "The model is overloaded"), ModelBusy),
        (status_error(400, "Bad request"), ModelError),
        (APITimeoutError(request=OPENAI_REQUEST), ModelTimeout),
    ])
    def test_chat_error_translation(self, provider, mock_client, error, expected):
        mock_client.chat.completions.create.side_effect = error

        with pytest.raises(expected) as exc_info:
            provider.chat(ChatRequest(model="gpt-4o-mini", messages=[{"role": "user", "content": "Hi"}]))

        if expected is ModelError:
            assert not isinstance(exc_info.value, (ModelBusy, ModelTimeout))

    def test_generate_image(self, provider, mock_client):
        image = Mock(b64_json=base64.b64encode(b"png-bytes").decode(), revised_prompt=None)
        mock_client.images.generate.return_value = Mock(data=[image])

        response = provider.generate_image(ImageRequest(model="gpt-image-1", prompt="a banyan tree", params={"size": "1024x1024"}))

        assert response.data == b"png-bytes"
        assert response.mime_type == "image/png"
        kwargs = mock_client.images.generate.call_args[1]
        assert kwargs["prompt"] == "a banyan tree"
        assert kwargs["size"] == "1024x1024"
        assert kwargs["n"] == 1

    def test_generate_image_without_data(self, provider, mock_client):
        mock_client.images.generate.return_value = Mock(data=[])

        with pytest.raises(ModelError, match="no image data"):
            provider.generate_image(ImageRequest(model="gpt-image-1", prompt="a banyan tree"))

    def test_synthesize_speech(self, provider, mock_client):
        mock_client.audio.speech.create.return_value = Mock(content=b"\x00\x01" * 10)

        response = provider.synthesize_speech(SpeechRequest(model="gpt-4o-mini-tts", text="Hello", voice="alloy"))

        assert response.data == b"\x00\x01" * 10
        assert response.mime_type == "audio/pcm"
        kwargs = mock_client.audio.speech.create.call_args[1]
        assert kwargs["voice"] == "alloy"
        assert kwargs["input"] == "Hello"
        assert kwargs["response_format"] == "pcm"

    def test_synthesize_speech_busy(self, provider, mock_client):
        mock_client.audio.speech.create.side_effect = status_error(503, "Service Unavailable")

        with pytest.raises(ModelBusy):
            provider.synthesize_speech(SpeechRequest(model="gpt-4o-mini-tts", text="Hello", voice="alloy"))

    def test_health_check(self, provider, mock_client):
        assert provider.health_check() is True
        mock_client.models.list.side_effect = Exception("unreachable")
        assert provider.health_check() is False
