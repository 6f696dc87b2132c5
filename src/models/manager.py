from __future__ import annotations
from typing import Optional, Dict, Any, List, Type, Union
from pathlib import Path
from dataclasses import dataclass
from enum import Enum
import yaml
import time
import logging
import threading
from contextlib import contextmanager

from pydantic import BaseModel

from .prompts import PromptManager
from .providers.base import (
    ChatRequest, ImageRequest, SpeechRequest, ModelResponse, MediaResponse, ModelError,
)
from .providers.ollama import OllamaProvider
from .providers.openai_sdk import OpenAIProvider

logger = logging.getLogger(__name__)


class Provider(Enum):
    OLLAMA = "ollama"
    OPENAI = "openai"

@dataclass(frozen=True)
class TaskConfig:
    provider: str
    model: str
    params: Dict[str, Any]
    timeout: Optional[float] = None
    extra_body: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "TaskConfig":
        return cls(
            provider=cfg["provider"],
            model=cfg["model"],
            params=dict(cfg.get("params") or {}),
            timeout=cfg.get("timeout"),
            extra_body=cfg.get("extra_body"),
        )


class ModelManager:
    def __init__(self, config_path: Union[Path, str], prompts_dir: Optional[Path] = None):
        self.config_path = Path(config_path)
        self.config = self._load_config()
        self._providers = {}
        self._stats = {} #performance tracking
        self._lock = threading.Lock() #flows call in from worker threads

        if prompts_dir:
            self.prompts = PromptManager(prompts_dir)
        else:
            src_root = Path(__file__).parents[1]
            self.prompts = PromptManager(src_root.parent / "prompts")

    def _load_config(self) -> Dict:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        if 'providers' not in config:
            raise ValueError("Config missing 'providers'")
        if 'tasks' not in config:
            raise ValueError("Config missing 'tasks'")

        for task_name, task_cfg in config['tasks'].items():
            if 'provider' not in task_cfg:
                raise ValueError(f"Task '{task_name}' missing provider")
            if 'model' not in task_cfg:
                raise ValueError(f"Task '{task_name}' missing model")

            provider_name = task_cfg['provider']
            if provider_name not in config['providers']:
                raise ValueError(f"Task '{task_name}' references unknown provider '{provider_name}'")

        return config

    def _get_provider(self, provider_name: str):
        with self._lock:
            if provider_name in self._providers:
                return self._providers[provider_name]
            return self._create_provider(provider_name)

    def _create_provider(self, provider_name: str):
        # caller holds the lock
        if provider_name not in self.config['providers']:
            raise ValueError(f"Unknown provider: {provider_name}")

        provider_cfg = self.config["providers"][provider_name]
        provider_type = provider_cfg["type"]
        settings = provider_cfg.get("settings") or {}

        if provider_type == Provider.OLLAMA.value:
            provider = OllamaProvider(**settings)
        elif provider_type == Provider.OPENAI.value:
            provider = OpenAIProvider(**settings)
        else:
            raise ValueError(f"Unknown provider type: {provider_type}")
        self._providers[provider_name] = provider
        logger.info(f"initialized provider: {provider_name}")
        return provider

    def task_config(self, task: str) -> TaskConfig:
        if task not in self.config["tasks"]:
            raise ValueError(f"Unknown task: {task}")
        return TaskConfig.from_dict(self.config["tasks"][task])

    def _params(self, task_cfg: TaskConfig, params_override: Dict[str, Any]) -> Dict[str, Any]:
        params = {**task_cfg.params, **params_override}
        if task_cfg.timeout:
            # explicit timeout in params_override takes precedence
            params.setdefault("timeout", task_cfg.timeout)
        return params

    def call(self, task: str, prompt_ref: str, variables: Dict[str, Any], schema: Optional[Type[BaseModel]] = None, images: Optional[List[Any]] = None, messages_override: Optional[List[Dict[str, str]]] = None, extra_body: Optional[Dict[str, Any]] = None, **params_override) -> ModelResponse:
        task_cfg = self.task_config(task)
        params = self._params(task_cfg, params_override)

        if messages_override:
            rendered = messages_override
            logger.debug(f"Using message override for task '{task}'. Bypassing prompt template.")
        else:
            rendered = self.prompts.render(prompt_ref, variables)
            stop_sequences = self.prompts.load_prompt(prompt_ref).stop_sequences
            if stop_sequences:
                params.setdefault("stop", list(stop_sequences))

        request = ChatRequest(
            model=task_cfg.model,
            messages=rendered,
            images=images,
            params=params,
            schema=schema,
            extra_body=extra_body if extra_body is not None else task_cfg.extra_body,
        )

        provider = self._get_provider(task_cfg.provider)
        with self._timed(task):
            return provider.chat(request)

    def generate_image(self, task: str, prompt: str, **params_override) -> MediaResponse:
        task_cfg = self.task_config(task)
        request = ImageRequest(
            model=task_cfg.model,
            prompt=prompt,
            params=self._params(task_cfg, params_override),
        )
        provider = self._get_provider(task_cfg.provider)
        with self._timed(task):
            return provider.generate_image(request)

    def synthesize_speech(self, task: str, text: str, voice: Optional[str] = None, **params_override) -> MediaResponse:
        task_cfg = self.task_config(task)
        params = self._params(task_cfg, params_override)
        # voice / voices are routing hints for us, not backend params
        default_voice = params.pop("voice", None)
        params.pop("voices", None)
        voice = voice or default_voice
        if not voice:
            raise ValueError(f"Task '{task}' has no voice configured")

        request = SpeechRequest(model=task_cfg.model, text=text, voice=voice, params=params)
        provider = self._get_provider(task_cfg.provider)
        with self._timed(task):
            return provider.synthesize_speech(request)

    @contextmanager
    def _timed(self, task: str):
        start_time = time.perf_counter()
        try:
            yield
        except ModelError:
            self._track_stats(task, (time.perf_counter() - start_time) * 1000, success=False)
            raise
        self._track_stats(task, (time.perf_counter() - start_time) * 1000, success=True)

    def _track_stats(self, task: str, latency_ms: float, success: bool):
        with self._lock:
            if task not in self._stats:
                self._stats[task] = {
                    'total_calls': 0,
                    'successful_calls': 0,
                    'total_latency_ms': 0
                }

            stats = self._stats[task]
            stats['total_calls'] += 1
            if success:
                stats['successful_calls'] += 1
                stats['total_latency_ms'] += latency_ms

    def get_stats(self, task: Optional[str] = None) -> Dict:
        with self._lock:
            if task:
                return dict(self._stats.get(task, {}))
            return {name: dict(stats) for name, stats in self._stats.items()}

    def cleanup(self):
        with self._lock:
            providers = list(self._providers.items())
            self._providers.clear()

        for name, provider in providers:
            if hasattr(provider, 'cleanup'):
                try:
                    provider.cleanup()
                    logger.info(f"Cleaned up provider: {name}")
                except Exception as e:
                    logger.error(f"Cleanup failed for {name}: {e}")

    @contextmanager
    def session(self):
        try:
            yield self
        finally:
            self.cleanup()
