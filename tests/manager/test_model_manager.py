import pytest
from pathlib import Path
from unittest.mock import Mock, patch
from concurrent.futures import ThreadPoolExecutor
import time
from pydantic import BaseModel

from src.models.manager import ModelManager, TaskConfig
from src.models.providers.base import ModelResponse, MediaResponse, ModelError, ModelBusy


class AnswerSchema(BaseModel):
    answer: str


class TestModelManager:
    """Test suite for ModelManager functionality"""

    @pytest.fixture
    def valid_config(self, tmp_path):
        config_content = """
providers:
  ollama_local:
    type: ollama
    settings:
      host: "http://localhost:11434"
      request_timeout_s: 120

  openai:
    type: openai
    settings:
      timeout: 60

tasks:
  knowledge:
    provider: openai
    model: "gpt-4o-mini"
    params:
      temperature: 0.7

  lesson_plan:
    provider: ollama_local
    model: "llama3.1:8b"
    params:
      temperature: 0.5
    timeout: 120

  image:
    provider: openai
    model: "gpt-image-1"
    params:
      size: "1024x1024"

  speech:
    provider: openai
    model: "gpt-4o-mini-tts"
    params:
      voice: "alloy"
      voices: ["alloy", "echo"]

  silent:
    provider: openai
    model: "gpt-4o-mini-tts"

  story:
    provider: openai
    model: "gemini-2.5-flash"
    extra_body:
      google:
        thinking_config:
          thinking_budget: 0
"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(config_content)
        return config_file

    @pytest.fixture
    def prompts_dir(self, tmp_path):
        prompts_dir = tmp_path / "prompts"
        prompt = prompts_dir / "knowledge" / "answer" / "v1"
        prompt.mkdir(parents=True)
        (prompt / "system.j2").write_text("You are a patient teacher.")
        (prompt / "user.j2").write_text("Answer in {{ language }}: {{ question }}")

        story = prompts_dir / "story" / "v1"
        story.mkdir(parents=True)
        (story / "system.j2").write_text("You tell short stories.")
        (story / "user.j2").write_text("A story about {{ topic }}")
        (story / "config.yaml").write_text("stop_sequences:\n  - \"THE END\"\n")
        return prompts_dir

    @pytest.fixture
    def manager(self, valid_config, prompts_dir):
        return ModelManager(valid_config, prompts_dir)

    def test_initialization_success(self, valid_config, prompts_dir):
        """
        Test: Successful ModelManager initialization
        How: Create manager with valid config and prompts directory
        Ensures: Providers are created lazily and stats start empty
        """
        manager = ModelManager(valid_config, prompts_dir)

        assert manager.config_path == Path(valid_config)
        assert manager.prompts is not None
        assert manager._providers == {}
        assert manager._stats == {}

    def test_missing_config_file(self, tmp_path, prompts_dir):
        with pytest.raises(FileNotFoundError):
            ModelManager(tmp_path / "missing.yaml", prompts_dir)

    @pytest.mark.parametrize("content,error", [
        ("tasks: {}", "missing 'providers'"),
        ("providers: {}", "missing 'tasks'"),
        ("providers: {p: {type: openai}}\ntasks:\n  t: {model: m}", "missing provider"),
        ("providers: {p: {type: openai}}\ntasks:\n  t: {provider: p}", "missing model"),
        ("providers: {p: {type: openai}}\ntasks:\n  t: {provider: q, model: m}", "unknown provider 'q'"),
    ])
    def test_invalid_config(self, tmp_path, prompts_dir, content, error):
        """
        Test: Config validation at load time
        How: Write broken configs and construct the manager
        Ensures: Misconfiguration fails at startup, not on the first request
        """
        config_file = tmp_path / "bad.yaml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=error):
            ModelManager(config_file, prompts_dir)

    def test_task_config(self, manager):
        cfg = manager.task_config("lesson_plan")

        assert cfg == TaskConfig(provider="ollama_local", model="llama3.1:8b", params={"temperature": 0.5}, timeout=120)

        with pytest.raises(ValueError, match="Unknown task"):
            manager.task_config("nonexistent")

    def test_call_renders_prompt_and_dispatches(self, manager):
        """
        Test: call() renders the prompt and sends a ChatRequest
        How: Patch the OpenAI provider class and inspect the request
        Ensures: Task model, params and schema reach the provider
        """
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.chat.return_value = ModelResponse(content='{"answer": "x"}', raw=None, meta={})

            manager.call(
                task="knowledge",
                prompt_ref="knowledge/answer@v1",
                variables={"question": "Why do leaves fall?", "language": "Hindi"},
                schema=AnswerSchema,
            )

        mock_provider_cls.assert_called_once_with(timeout=60)
        request = provider.chat.call_args[0][0]
        assert request.model == "gpt-4o-mini"
        assert request.schema is AnswerSchema
        assert request.params == {"temperature": 0.7}
        assert request.messages[1] == {"role": "user", "content": "Answer in Hindi: Why do leaves fall?"}

    def test_call_params_override_and_task_timeout(self, manager):
        with patch('src.models.manager.OllamaProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.chat.return_value = ModelResponse(content="plan", raw=None, meta={})

            manager.call("lesson_plan", "unused@v1", {}, messages_override=[{"role": "user", "content": "Plan"}], temperature=0.1)

        request = provider.chat.call_args[0][0]
        assert request.messages == [{"role": "user", "content": "Plan"}]
        assert request.params == {"temperature": 0.1, "timeout": 120}

    def test_providers_are_cached(self, manager):
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            mock_provider_cls.return_value.chat.return_value = ModelResponse(content="a", raw=None, meta={})
            for _ in range(3):
                manager.call("knowledge", "knowledge/answer@v1", {"question": "q", "language": "English"})

        mock_provider_cls.assert_called_once()

    def test_generate_image(self, manager):
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.generate_image.return_value = MediaResponse(data=b"png", mime_type="image/png", raw=None, meta={})

            result = manager.generate_image("image", "a village well", quality="low")

        request = provider.generate_image.call_args[0][0]
        assert request.prompt == "a village well"
        assert request.params == {"size": "1024x1024", "quality": "low"}
        assert result.data == b"png"

    def test_synthesize_speech_voice_routing(self, manager):
        """
        Test: Voice selection for speech tasks
        How: Call with and without an explicit voice
        Ensures: voice/voices never leak into backend params
        """
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.synthesize_speech.return_value = MediaResponse(data=b"pcm", mime_type="audio/pcm", raw=None, meta={})

            manager.synthesize_speech("speech", "Hello")
            default_request = provider.synthesize_speech.call_args[0][0]
            manager.synthesize_speech("speech", "Hello", voice="echo")
            explicit_request = provider.synthesize_speech.call_args[0][0]

        assert default_request.voice == "alloy"
        assert default_request.params == {}
        assert explicit_request.voice == "echo"

    def test_synthesize_speech_without_voice(self, manager):
        with pytest.raises(ValueError, match="no voice"):
            manager.synthesize_speech("silent", "Hello")

    def test_stats_tracking(self, manager):
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.chat.side_effect = [
                ModelResponse(content="a", raw=None, meta={}),
                ModelBusy("503 overloaded"),
            ]
            manager.call("knowledge", "knowledge/answer@v1", {"question": "q", "language": "English"})
            with pytest.raises(ModelError):
                manager.call("knowledge", "knowledge/answer@v1", {"question": "q", "language": "English"})

        stats = manager.get_stats("knowledge")
        assert stats["total_calls"] == 2
        assert stats["successful_calls"] == 1
        assert manager.get_stats("image") == {}

    def test_cleanup(self, manager):
        provider = Mock()
        manager._providers["openai"] = provider

        with manager.session():
            pass

        provider.cleanup.assert_called_once()
        assert manager._providers == {}

    def test_bundled_config_loads(self):
        """The shipped config references only known providers and prompts exist for it."""
        root = Path(__file__).parents[2]
        manager = ModelManager(root / "src" / "config" / "config.yaml")

        for task in ["knowledge", "lesson_plan", "worksheets", "story", "visual_prompt", "script", "image", "sketch", "speech", "dialogue_speech"]:
            assert manager.task_config(task).model
        assert manager.prompts.load_prompt("role_play/script@v1").ref == "role_play/script@v1"

    def test_prompt_stop_sequences_become_stop_param(self, manager):
        """
        Test: Prompt config with stop_sequences
        How: Call a task whose prompt declares a stop sequence, then override it
        Ensures: The stop sequence reaches the provider unless the caller passes one
        """
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.chat.return_value = ModelResponse(content="Once...", raw=None, meta={})

            manager.call("knowledge", "story@v1", {"topic": "rain"})
            default_request = provider.chat.call_args[0][0]
            manager.call("knowledge", "story@v1", {"topic": "rain"}, stop=["FIN"])
            override_request = provider.chat.call_args[0][0]

        assert default_request.params == {"temperature": 0.7, "stop": ["THE END"]}
        assert override_request.params["stop"] == ["FIN"]

    def test_extra_body_from_task_and_call(self, manager):
        with patch('src.models.manager.OpenAIProvider') as mock_provider_cls:
            provider = mock_provider_cls.return_value
            provider.chat.return_value = ModelResponse(content="story", raw=None, meta={})

            manager.call("story", "story@v1", {"topic": "rain"})
            task_request = provider.chat.call_args[0][0]
            manager.call("story", "story@v1", {"topic": "rain"}, extra_body={"seed": 7})
            call_request = provider.chat.call_args[0][0]
            manager.call("knowledge", "knowledge/answer@v1", {"question": "q", "language": "English"})
            plain_request = provider.chat.call_args[0][0]

        assert task_request.extra_body == {"google": {"thinking_config": {"thinking_budget": 0}}}
        assert "extra_body" not in task_request.params
        assert call_request.extra_body == {"seed": 7}
        assert plain_request.extra_body is None

    def test_concurrent_provider_creation_builds_one_client(self, manager):
        """
        Test: Two worker threads asking for the same uncached provider
        How: Provider constructor takes 0.1s, both threads call _get_provider at once
        Ensures: Exactly one client is built and both threads get it
        """
        def slow_provider(**settings):
            time.sleep(0.1)
            return Mock()

        with patch('src.models.manager.OpenAIProvider', side_effect=slow_provider) as mock_provider_cls:
            with ThreadPoolExecutor(max_workers=2) as pool:
                first, second = pool.map(lambda _: manager._get_provider("openai"), range(2))

        assert mock_provider_cls.call_count == 1
        assert first is second
        assert manager._providers == {"openai": first}

    def test_concurrent_stats_are_not_lost(self, manager):
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: manager._track_stats("knowledge", 1.0, success=i % 2 == 0), range(400)))

        stats = manager.get_stats("knowledge")
        assert stats["total_calls"] == 400
        assert stats["successful_calls"] == 200
        assert stats["total_latency_ms"] == 200.0
