from __future__ import annotations
import io
import wave

from .image_converter import to_data_uri

# raw pcm returned by the speech backend
PCM_CHANNELS = 1
PCM_SAMPLE_RATE = 24000
PCM_SAMPLE_WIDTH = 2 #16-bit


def pcm_to_wav(pcm: bytes, channels: int = PCM_CHANNELS, rate: int = PCM_SAMPLE_RATE, sample_width: int = PCM_SAMPLE_WIDTH) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


def pcm_to_wav_data_uri(pcm: bytes) -> str:
    return to_data_uri(pcm_to_wav(pcm), "audio/wav")
