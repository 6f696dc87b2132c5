# tests/prompts/test_prompts.py

import pytest
from pathlib import Path
import tempfile
import shutil

from src.models.prompts import PromptManager, PromptConfig

REPO_PROMPTS = Path(__file__).parents[2] / "prompts"


@pytest.fixture
def temp_prompts_dir():
    """Create a temporary prompts directory with test data"""
    temp_dir = tempfile.mkdtemp()
    prompts_path = Path(temp_dir)

    story_v1 = prompts_path / "story" / "tell" / "v1"
    story_v1.mkdir(parents=True)

    (story_v1 / "config.yaml").write_text("""
description: Short story for young children.
stop_sequences:
  - "THE END"
""")
    (story_v1 / "system.j2").write_text("You write short stories for children in rural India.")
    (story_v1 / "user.j2").write_text("""Write a story in {{ language }} about {{ prompt }}.
{% if setting is defined %}
Setting: {{ setting }}
{% endif %}""")

    # prompt without config file
    plan_v1 = prompts_path / "lesson" / "plan" / "v1"
    plan_v1.mkdir(parents=True)
    (plan_v1 / "system.j2").write_text("You plan lessons.")
    (plan_v1 / "user.j2").write_text("Syllabus: {{ weekly_syllabus }}")

    # empty config
    minimal_v1 = prompts_path / "minimal" / "test" / "v1"
    minimal_v1.mkdir(parents=True)
    (minimal_v1 / "config.yaml").write_text("")
    (minimal_v1 / "system.j2").write_text("Simple system prompt.")
    (minimal_v1 / "user.j2").write_text("User: {{ input }}")

    yield prompts_path

    shutil.rmtree(temp_dir)


@pytest.fixture
def manager(temp_prompts_dir):
    return PromptManager(temp_prompts_dir)


class TestPromptLoading:

    def test_load_valid_prompt_with_config(self, manager):
        config = manager.load_prompt("story/tell@v1")

        assert isinstance(config, PromptConfig)
        assert config.name == "story/tell"
        assert config.version == "v1"
        assert config.description == "Short story for young children."
        assert config.stop_sequences == ["THE END"]
        assert "{{ language }}" in config.user_template

    def test_load_prompt_without_config(self, manager):
        config = manager.load_prompt("lesson/plan@v1")

        assert config.stop_sequences is None
        assert config.description is None

    def test_load_prompt_with_empty_config(self, manager):
        config = manager.load_prompt("minimal/test@v1")
        assert config.stop_sequences is None

    def test_missing_prompts_dir(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PromptManager(tmp_path / "nope")

    def test_load_missing_prompt(self, manager):
        with pytest.raises(FileNotFoundError, match="Prompt not found"):
            manager.load_prompt("story/tell@v9")

    def test_load_missing_user_template(self, temp_prompts_dir, manager):
        broken = temp_prompts_dir / "broken" / "prompt" / "v1"
        broken.mkdir(parents=True)
        (broken / "system.j2").write_text("System only")

        with pytest.raises(FileNotFoundError, match="user.j2"):
            manager.load_prompt("broken/prompt@v1")

    def test_invalid_reference_format(self, manager):
        with pytest.raises(ValueError, match="Invalid prompt reference"):
            manager.load_prompt("story/tell")

    def test_caching(self, manager):
        config1 = manager.load_prompt("story/tell@v1")
        config2 = manager.load_prompt("story/tell@v1")
        assert config1 is config2

        manager.clear_cache()
        assert manager.load_prompt("story/tell@v1") is not config1

    def test_prompt_config_ref_property(self, manager):
        assert manager.load_prompt("story/tell@v1").ref == "story/tell@v1"


class TestPromptRendering:

    def test_render_with_optional_variable(self, manager):
        messages = manager.render("story/tell@v1", {"language": "Marathi", "prompt": "a farmer and the rain", "setting": "a village in Vidarbha"})

        assert messages[0] == {"role": "system", "content": "You write short stories for children in rural India."}
        assert messages[1]["role"] == "user"
        assert "Write a story in Marathi about a farmer and the rain." in messages[1]["content"]
        assert "Setting: a village in Vidarbha" in messages[1]["content"]

    def test_render_without_optional_variable(self, manager):
        messages = manager.render("story/tell@v1", {"language": "Marathi", "prompt": "a farmer"})
        assert "Setting:" not in messages[1]["content"]

    def test_render_missing_required_variable(self, manager):
        with pytest.raises(ValueError, match="Missing required variable"):
            manager.render("story/tell@v1", {"language": "Marathi"})

    def test_render_unicode_variables(self, manager):
        messages = manager.render("lesson/plan@v1", {"weekly_syllabus": "प्रकाश संश्लेषण, जल चक्र"})
        assert messages[1]["content"] == "Syllabus: प्रकाश संश्लेषण, जल चक्र"


class TestShippedPrompts:
    """Every prompt the flows use renders with the variables the flows pass."""

    @pytest.fixture
    def repo_manager(self):
        return PromptManager(REPO_PROMPTS)

    @pytest.mark.parametrize("prompt_ref,variables", [
        ("knowledge/answer@v1", {"question": "Why is the sky blue?", "language": "English"}),
        ("ask_later/answer@v1", {"question": "Why is the sky blue?", "language": "Hindi"}),
        ("lesson_plan/generate@v1", {"weekly_syllabus": "Fractions, decimals"}),
        ("worksheets/differentiate@v1", {}),
        ("story/hyperlocal@v1", {"prompt": "कहानी", "language": "Hindi"}),
        ("story/visual_prompt@v1", {"story": "Once upon a time..."}),
        ("role_play/script@v1", {"topic": "Buying vegetables", "language": "English"}),
    ])
    def test_render(self, repo_manager, prompt_ref, variables):
        messages = repo_manager.render(prompt_ref, variables)

        assert [m["role"] for m in messages] == ["system", "user"]
        assert all(m["content"].strip() for m in messages)

    def test_role_play_optional_details(self, repo_manager):
        without = repo_manager.render("role_play/script@v1", {"topic": "Saving water", "language": "English"})[1]["content"]
        with_details = repo_manager.render(
            "role_play/script@v1",
            {"topic": "Saving water", "language": "English", "characters": "Teacher, Student", "setting": "A school garden"}
        )[1]["content"]

        assert "invent a simple and relevant set of characters" in without
        assert "Characters: Teacher, Student" in with_details
        assert "Context: A school garden" in with_details
        assert "invent a simple" not in with_details
