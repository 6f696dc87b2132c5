"""
Knowledge assistant endpoint: student questions answered with an analogy.
"""

from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import KnowledgeResponse
from src.flows.knowledge import KnowledgeAssistantFlow
from src.flows.types import KnowledgeInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/answer", response_model=KnowledgeResponse)
async def answer_question(
    request: KnowledgeInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    result = await run_flow(KnowledgeAssistantFlow(model_manager), request)
    return KnowledgeResponse(success=True, message="Answer generated successfully", data=result)
