"""
Role-play scripts and their multi-speaker audio.

Scripts are Markdown with one dialogue turn per line, ``**Name:** words``,
and stage directions on their own lines in parentheses. Audio gives every
character its own voice when the cast has between two and five members;
any other cast size, or any failure, falls back to reading the whole script
with one voice. Audio generation never raises.
"""

from dataclasses import dataclass
from typing import List, Optional
import asyncio
import logging
import re

from src.models.providers.base import ModelError
from src.utils.audio import pcm_to_wav_data_uri
from .base import Flow, settle
from .speech import speak
from .types import RolePlayScriptInput, RolePlayScriptOutput, RolePlayAudioInput, RolePlayAudioOutput

logger = logging.getLogger(__name__)

MIN_SPEAKERS = 2
MAX_SPEAKERS = 5
DEFAULT_VOICES = ["alloy", "echo", "fable", "onyx", "nova"]
MAX_CONCURRENT_TURNS = 3 #speech requests in flight per script

SPEAKER_PATTERN = re.compile(r"^\s*\**(.+?)\**\s*:")
BOLD_SPEAKER_PATTERN = re.compile(r"\*\*(.*?):\*\*")
INLINE_DIRECTION_PATTERN = re.compile(r"\([^)]*\)")


@dataclass
class DialogueTurn:
    speaker: str
    text: str


def _dialogue_lines(script: str) -> List[str]:
    return [line for line in script.split("\n") if line.strip() and not line.strip().startswith("(")]


def extract_characters(script: str) -> List[str]:
    """Distinct speaker names in order of first appearance."""
    characters: List[str] = []
    for line in _dialogue_lines(script):
        match = SPEAKER_PATTERN.match(line)
        if match:
            name = match.group(1).strip()
            if name not in characters:
                characters.append(name)
    return characters


def split_turns(script: str) -> List[DialogueTurn]:
    """
    Dialogue turns in script order. Unattributed lines continue the previous
    turn; parenthesised directions are not spoken.
    """
    turns: List[DialogueTurn] = []
    for line in _dialogue_lines(script):
        match = SPEAKER_PATTERN.match(line)
        if match:
            speaker = match.group(1).strip()
            text = line[match.end():]
            turns.append(DialogueTurn(speaker=speaker, text=""))
        elif turns:
            text = line
        else:
            continue
        spoken = INLINE_DIRECTION_PATTERN.sub("", text).replace("*", "").strip()
        if spoken:
            turns[-1].text = f"{turns[-1].text} {spoken}".strip()
    return [turn for turn in turns if turn.text]


def plain_reading(script: str) -> str:
    """Script flattened for a single narrator: bold speaker markers dropped, one line."""
    return re.sub(r"(\r\n|\n|\r)", " ", BOLD_SPEAKER_PATTERN.sub(r"\1:", script))


class RolePlayScriptFlow(Flow):
    name = "role_play_script"
    input_model = RolePlayScriptInput
    output_model = RolePlayScriptOutput
    failure_message = "An unexpected error occurred while generating the script. Please try again."

    async def execute(self, flow_input: RolePlayScriptInput) -> RolePlayScriptOutput:
        script = await self.primary(self._script, flow_input)
        return RolePlayScriptOutput(script=script)

    def _script(self, flow_input: RolePlayScriptInput) -> str:
        variables = {"topic": flow_input.topic, "language": flow_input.language}
        # optional inputs stay undefined so the template can invent them
        if flow_input.characters and flow_input.characters.strip():
            variables["characters"] = flow_input.characters.strip()
        if flow_input.setting and flow_input.setting.strip():
            variables["setting"] = flow_input.setting.strip()

        response = self.model_manager.call(
            task="script",
            prompt_ref="role_play/script@v1",
            variables=variables,
        )
        if not response.content.strip():
            raise ModelError("The model returned an empty script.")
        return response.content


class RolePlayAudioFlow(Flow):
    name = "role_play_audio"
    input_model = RolePlayAudioInput
    output_model = RolePlayAudioOutput

    async def execute(self, flow_input: RolePlayAudioInput) -> RolePlayAudioOutput:
        script = flow_input.script
        characters = extract_characters(script)

        if MIN_SPEAKERS <= len(characters) <= MAX_SPEAKERS:
            try:
                pcm = await self._multi_speaker(script, characters)
                if pcm:
                    return RolePlayAudioOutput(audio_data_uri=pcm_to_wav_data_uri(pcm))
                logger.warning("Multi-speaker speech returned no audio. Attempting fallback.")
            except Exception as e:
                logger.error(f"Multi-speaker audio generation failed, attempting fallback: {e}")
        else:
            logger.warning(f"Multi-speaker audio generation skipped: found {len(characters)} characters. Attempting fallback.")

        return RolePlayAudioOutput(audio_data_uri=await self._single_speaker(script))

    def voice_assignments(self, characters: List[str]) -> dict:
        voices = self.model_manager.task_config("dialogue_speech").params.get("voices") or DEFAULT_VOICES
        return {character: voices[index % len(voices)] for index, character in enumerate(characters)}

    async def _multi_speaker(self, script: str, characters: List[str]) -> bytes:
        voices = self.voice_assignments(characters)
        turns = split_turns(script)
        if not turns:
            return b""

        results = await settle(*[
            (lambda turn=turn: self.model_manager.synthesize_speech("dialogue_speech", turn.text, voice=voices[turn.speaker]))
            for turn in turns
        ], limit=MAX_CONCURRENT_TURNS)
        for turn, result in zip(turns, results):
            if isinstance(result, BaseException):
                raise ModelError(f"Speech for '{turn.speaker}' failed: {result}") from result
        # pcm segments share one format, so concatenation is a valid stream
        return b"".join(result.data for result in results)

    async def _single_speaker(self, script: str) -> Optional[str]:
        logger.info("Falling back to single-speaker speech.")
        try:
            return await asyncio.to_thread(speak, self.model_manager, plain_reading(script))
        except Exception as e:
            logger.error(f"Single-speaker speech fallback also failed: {e}")
            return None
