from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import WorksheetResponse
from src.flows.worksheets import DifferentiatedWorksheetFlow
from src.flows.types import WorksheetInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/generate", response_model=WorksheetResponse)
async def generate_worksheets(
    request: WorksheetInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    """
    Generate easy, intermediate and advanced worksheets from a photo of a
    textbook page sent as a base64 data URI.
    """
    result = await run_flow(DifferentiatedWorksheetFlow(model_manager), request)
    return WorksheetResponse(success=True, message="Worksheets generated successfully", data=result)
