from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import time
import httpx
from pydantic import ValidationError
from ollama import Client, ResponseError
from .base import ModelProvider, ChatRequest, ModelResponse, ModelError, ModelBusy, ModelTimeout
from ...utils.image_converter import to_base64

logger = logging.getLogger(__name__)

BUSY_STATUS = {429, 503}

def _is_busy(exc: ResponseError) -> bool:
    try:
        if int(getattr(exc, "status_code", 0)) in BUSY_STATUS:
            return True
    except (TypeError, ValueError):
        pass
    return "overloaded" in str(exc).lower()

class OllamaProvider(ModelProvider):
    def __init__(self, host: str = "http://localhost:11434", request_timeout_s: float = 300, keep_alive: str = "5m"):
        self.client = Client(host=host, timeout=request_timeout_s)
        self.keep_alive = keep_alive
        self.host = host
        self.request_timeout_s = request_timeout_s

    def _process_messages(self, messages: List[Dict[str, Any]], images: Optional[List[Any]]) -> List[Dict[str, Any]]:
        if not images: return messages
        base64_images = [to_base64(img) for img in images]
        processed_messages = []
        images_added = False
        for msg in messages:
            if msg.get("role") == "user" and not images_added:
                processed_msg = msg.copy()
                processed_msg["images"] = base64_images
                processed_messages.append(processed_msg)
                images_added = True
            else:
                processed_messages.append(msg)
        return processed_messages

    def chat(self, req: ChatRequest) -> ModelResponse:
        options = dict(req.params or {})
        keep_alive = options.pop('keep_alive', self.keep_alive)

        custom_timeout = options.pop('timeout', self.request_timeout_s)
        client = Client(host=self.host, timeout=custom_timeout) if custom_timeout != self.request_timeout_s else self.client

        messages = self._process_messages(req.messages, req.images)
        json_format = req.schema.model_json_schema() if req.schema else None

        t0 = time.perf_counter()

        try:
            response = client.chat(
                model=req.model,
                messages=messages,
                options=options,
                format=json_format,
                keep_alive=keep_alive
            )
        except (httpx.ReadTimeout, httpx.ConnectTimeout) as e:
            raise ModelTimeout(f"Ollama timeout after {custom_timeout}s: {e}") from e
        except ResponseError as e:
            msg = f"Ollama error ({getattr(e, 'status_code', None)}): {e}"
            if _is_busy(e): raise ModelBusy(msg) from e
            raise ModelError(msg) from e
        except Exception as e:
            raise ModelError(f"Ollama request failed: {e}") from e

        dt = time.perf_counter() - t0

        # The ollama client returns either a plain dict or a ChatResponse object
        content = ""
        model_name = req.model
        raw_response_dict = {}

        if isinstance(response, dict):
            raw_response_dict = response
            if isinstance(response.get('message'), dict):
                content = response['message'].get('content', '') or ''
            model_name = response.get('model', req.model)
        elif hasattr(response, 'message') and hasattr(response.message, 'content'):
            content = response.message.content or ''
            model_name = getattr(response, 'model', req.model)
            try:
                raw_response_dict = response.__dict__
            except AttributeError:
                raw_response_dict = {}
        else:
            raise ModelError(f"Received unexpected response structure from Ollama: {response}")

        meta = {"provider": "ollama", "model": model_name, "latency": dt}
        for key in ['total_duration', 'load_duration', 'prompt_eval_count', 'prompt_eval_duration', 'eval_count', 'eval_duration']:
            if key in raw_response_dict:
                meta[key] = raw_response_dict[key]

        parsed = None
        if req.schema and content:
            try:
                parsed = req.schema.model_validate_json(content)
            except ValidationError as ve:
                meta["validation_error"] = f"Failed to validate JSON: {ve}. Raw content: {content[:500]}"
                logger.warning(f"Schema validation failed for model {model_name}: {ve}")

        return ModelResponse(content=content, raw=response, meta=meta, parsed=parsed)

    def health_check(self) -> bool:
        try:
            self.client.list()
            return True
        except Exception:
            return False
