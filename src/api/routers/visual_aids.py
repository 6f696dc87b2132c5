"""
Visual aid endpoints: AI blackboard sketches and web image search links.
"""

from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import VisualAidResponse, ImageSearchRequest, ImageSearchResponse, ImageSearchData
from src.flows.visual_aid import VisualAidFlow, image_search_url
from src.flows.types import VisualAidInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/sketch", response_model=VisualAidResponse)
async def generate_sketch(
    request: VisualAidInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    result = await run_flow(VisualAidFlow(model_manager), request)
    return VisualAidResponse(success=True, message="Visual aid generated successfully", data=result)

@router.post("/search", response_model=ImageSearchResponse)
async def image_search(request: ImageSearchRequest):
    """Build a large-image web search link; the browser opens it."""
    return ImageSearchResponse(
        success=True,
        message="Search link created",
        data=ImageSearchData(url=image_search_url(request.query))
    )
