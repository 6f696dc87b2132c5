from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Union, Type
from pydantic import BaseModel
from PIL import Image

#unified model errors
class ModelError(RuntimeError): ...
class ModelTimeout(ModelError): ...
class ModelBusy(ModelError): ... #backend reported 429/503/overloaded, message kept verbatim

@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: List[Dict[str, Any]]
    params: Dict[str, Any] | None = None
    schema: Optional[Type[BaseModel]] = None #pydantic model -> json schema
    extra_body: Optional[Dict[str, Any]] = None #extra body for openai-compatible endpoints (gemini, openrouter)
    images: Optional[List[Union[str, bytes, Image.Image]]] = None #images to include in the chat

@dataclass(frozen=True)
class ImageRequest:
    model: str
    prompt: str
    params: Dict[str, Any] | None = None

@dataclass(frozen=True)
class SpeechRequest:
    model: str
    text: str
    voice: str
    params: Dict[str, Any] | None = None

@dataclass(frozen=True)
class ModelResponse:
    content: str
    raw: Any #provider-native response obj/dict
    meta: Dict[str, Any] #timings, token  counts, model, created_at, etc.
    parsed: Optional[BaseModel] = None #populated if schema was provided

@dataclass(frozen=True)
class MediaResponse:
    data: bytes #png bytes for images, raw pcm for speech
    mime_type: str
    raw: Any
    meta: Dict[str, Any]

class ModelProvider(ABC):
    @abstractmethod
    def chat(self, req: ChatRequest) -> ModelResponse:
        raise NotImplementedError

    @abstractmethod
    def health_check(self) -> bool:
        raise NotImplementedError

    def generate_image(self, req: ImageRequest) -> MediaResponse:
        raise ModelError(f"{type(self).__name__} does not support image generation")

    def synthesize_speech(self, req: SpeechRequest) -> MediaResponse:
        raise ModelError(f"{type(self).__name__} does not support speech synthesis")
