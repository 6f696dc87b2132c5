from typing import Optional

from src.models.manager import ModelManager
from src.models.providers.base import ModelError
from src.utils.audio import pcm_to_wav_data_uri
from .base import Flow
from .types import SpeechInput, SpeechOutput


def speak(model_manager: ModelManager, text: str, task: str = "speech", voice: Optional[str] = None) -> str:
    """Synthesize text and return it as a wav data URI."""
    audio = model_manager.synthesize_speech(task, text, voice=voice)
    if not audio.data:
        raise ModelError("no media returned")
    return pcm_to_wav_data_uri(audio.data)


class TextToSpeechFlow(Flow):
    name = "text_to_speech"
    input_model = SpeechInput
    output_model = SpeechOutput
    failure_message = "Failed to generate speech. Please try again."

    async def execute(self, flow_input: SpeechInput) -> SpeechOutput:
        audio_data_uri = await self.primary(speak, self.model_manager, flow_input.text)
        return SpeechOutput(audio_data_uri=audio_data_uri)
