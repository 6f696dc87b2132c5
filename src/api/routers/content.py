"""
Hyperlocal content endpoints: stories in the local language with an illustration.
"""

from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import HyperlocalResponse
from src.flows.hyperlocal import HyperlocalContentFlow
from src.flows.types import HyperlocalInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/hyperlocal", response_model=HyperlocalResponse)
async def generate_hyperlocal_content(
    request: HyperlocalInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    """
    Generate a culturally relevant story.

    The story is required; when the illustration cannot be produced the
    response still succeeds with a placeholder image URL.
    """
    result = await run_flow(HyperlocalContentFlow(model_manager), request)
    return HyperlocalResponse(success=True, message="Story generated successfully", data=result)
