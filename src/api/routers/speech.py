from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import SpeechResponse
from src.flows.speech import TextToSpeechFlow
from src.flows.types import SpeechInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/synthesize", response_model=SpeechResponse)
async def synthesize(
    request: SpeechInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    """Read text aloud; returns a wav data URI."""
    result = await run_flow(TextToSpeechFlow(model_manager), request)
    return SpeechResponse(success=True, message="Speech generated successfully", data=result)
