from __future__ import annotations
from typing import Dict, Any, Optional, List
import base64
import time
from os import getenv
from pydantic import ValidationError

from openai import OpenAI
from openai import APIError, APIStatusError, APITimeoutError

from .base import (
    ModelProvider, ChatRequest, ImageRequest, SpeechRequest, ModelResponse, MediaResponse,
    ModelError, ModelBusy, ModelTimeout,
)
from ...utils.image_converter import to_base64, image_mime_type

BUSY_STATUS = {429, 503}

def _is_busy(exc: BaseException) -> bool:
    if isinstance(exc, APIStatusError) and exc.status_code in BUSY_STATUS:
        return True
    return "overloaded" in str(exc).lower()

def _translate_error(exc: Exception, operation: str) -> ModelError:
    if isinstance(exc, APITimeoutError):
        return ModelTimeout(f"OpenAI {operation} timeout: {exc}")
    if isinstance(exc, APIError):
        status = getattr(exc, "status_code", None)
        msg = f"OpenAI API error ({status}) during {operation}: {exc}" if status else f"OpenAI API error during {operation}: {exc}"
        if _is_busy(exc):
            return ModelBusy(msg)
        return ModelError(msg)
    return ModelError(f"OpenAI provider error during {operation}: {exc}")

class OpenAIProvider(ModelProvider):
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, api_key_env: str = "OPENAI_API_KEY", default_headers: Optional[Dict[str, str]] = None, timeout: float = 60.0, **kwargs):
        self.client = OpenAI(
            base_url=base_url,
            api_key=api_key or getenv(api_key_env),
            default_headers=default_headers or {},
            timeout=timeout,
            max_retries=0, #busy responses are surfaced to the user, not retried
            **kwargs
        )
        self.base_url = base_url
        self.timeout = timeout

    def _format_messages(self, messages: List[Dict[str, Any]], images: List[Any]) -> List[Dict[str, Any]]:
        """Format messages with images for OpenAI - converts to content array format"""
        if not images:
            return messages

        image_contents = []
        for img in images:
            try:
                base64_data = to_base64(img)
                mime_type = image_mime_type(img)
            except Exception as e:
                raise ModelError(f"Failed to convert image for OpenAI: {e}") from e
            image_contents.append({
                "type": "image_url",
                "image_url": {
                    "url": f"data:{mime_type};base64,{base64_data}",
                    "detail": "high"
                }
            })

        # OpenAI expects images in content array format
        processed_messages = []
        images_added = False

        for msg in messages:
            if msg.get("role") == "user" and not images_added:
                processed_msg = msg.copy()
                content_array = [{"type": "text", "text": msg.get("content", "")}]
                content_array.extend(image_contents)
                processed_msg["content"] = content_array
                processed_messages.append(processed_msg)
                images_added = True
            else:
                processed_messages.append(msg)

        return processed_messages

    def chat(self, req: ChatRequest) -> ModelResponse:
        params = dict(req.params or {})

        response_format = None
        if req.schema is not None:
            response_format = {
                "type": "json_schema",
                "json_schema": {
                    "name": "response_schema",
                    "schema": req.schema.model_json_schema()
                }
            }

        messages = self._format_messages(req.messages, req.images or [])

        completion_params = {
            "model": req.model,
            "messages": messages,
            **params
        }

        if response_format:
            completion_params["response_format"] = response_format

        if req.extra_body:
            completion_params["extra_body"] = req.extra_body

        t0 = time.perf_counter()
        try:
            response = self.client.chat.completions.create(**completion_params)
        except Exception as e:
            raise _translate_error(e, "chat") from e

        dt = time.perf_counter() - t0

        try:
            content = response.choices[0].message.content or ""
        except (IndexError, AttributeError) as e:
            raise ModelError(f"Invalid response structure from OpenAI API: {e}") from e

        meta = {
            "provider": "openai",
            "model": getattr(response, 'model', req.model),
            "latency": dt,
            "base_url": self.base_url or "https://api.openai.com/v1",
            "timeout": self.timeout
        }

        if getattr(response, 'usage', None):
            try:
                meta["usage"] = response.usage.model_dump()
            except AttributeError:
                meta["usage"] = {
                    "prompt_tokens": getattr(response.usage, 'prompt_tokens', None),
                    "completion_tokens": getattr(response.usage, 'completion_tokens', None),
                    "total_tokens": getattr(response.usage, 'total_tokens', None)
                }

        meta["finish_reason"] = getattr(response.choices[0], 'finish_reason', None)

        if hasattr(response, 'id'):
            meta["id"] = response.id

        parsed = None
        if req.schema is not None and content:
            try:
                parsed = req.schema.model_validate_json(content)
            except ValidationError as ve:
                # recorded, not raised: callers decide whether an unparsed answer is fatal
                meta["validation_error"] = str(ve)

        return ModelResponse(content=content, raw=response, meta=meta, parsed=parsed)

    def generate_image(self, req: ImageRequest) -> MediaResponse:
        params = dict(req.params or {})
        params.setdefault("n", 1)

        t0 = time.perf_counter()
        try:
            response = self.client.images.generate(model=req.model, prompt=req.prompt, **params)
        except Exception as e:
            raise _translate_error(e, "image generation") from e
        dt = time.perf_counter() - t0

        data = getattr(response, "data", None) or []
        b64 = getattr(data[0], "b64_json", None) if data else None
        if not b64:
            raise ModelError("OpenAI image generation returned no image data")

        meta = {"provider": "openai", "model": req.model, "latency": dt}
        revised = getattr(data[0], "revised_prompt", None)
        if revised:
            meta["revised_prompt"] = revised

        return MediaResponse(data=base64.b64decode(b64), mime_type="image/png", raw=response, meta=meta)

    def synthesize_speech(self, req: SpeechRequest) -> MediaResponse:
        params = dict(req.params or {})
        params["response_format"] = "pcm" #24kHz 16-bit mono, wrapped into wav by the caller

        t0 = time.perf_counter()
        try:
            response = self.client.audio.speech.create(model=req.model, voice=req.voice, input=req.text, **params)
        except Exception as e:
            raise _translate_error(e, "speech synthesis") from e
        dt = time.perf_counter() - t0

        audio = response.content
        if not audio:
            raise ModelError("OpenAI speech synthesis returned no audio")

        meta = {"provider": "openai", "model": req.model, "voice": req.voice, "latency": dt, "bytes": len(audio)}
        return MediaResponse(data=audio, mime_type="audio/pcm", raw=response, meta=meta)

    def health_check(self) -> bool:
        """SYNCHRONOUS health check - blocks until complete"""
        try:
            _ = self.client.models.list()
            return True
        except Exception:
            return False
