"""
Role-play endpoints. Script and audio are separate calls so the script can
be shown while its audio is still being produced.
"""

from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import RolePlayScriptResponse, RolePlayAudioResponse
from src.flows.role_play import RolePlayScriptFlow, RolePlayAudioFlow
from src.flows.types import RolePlayScriptInput, RolePlayAudioInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/script", response_model=RolePlayScriptResponse)
async def generate_script(
    request: RolePlayScriptInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    result = await run_flow(RolePlayScriptFlow(model_manager), request)
    return RolePlayScriptResponse(success=True, message="Script generated successfully", data=result)

@router.post("/audio", response_model=RolePlayAudioResponse)
async def generate_script_audio(
    request: RolePlayAudioInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    """
    Multi-speaker audio for a script. Never fails on generation problems:
    ``audio_data_uri`` is null when no audio could be produced.
    """
    result = await run_flow(RolePlayAudioFlow(model_manager), request)
    if result.audio_data_uri is None:
        return RolePlayAudioResponse(success=False, message="Audio is not available for this script", data=result)
    return RolePlayAudioResponse(success=True, message="Audio generated successfully", data=result)
