from fastapi import APIRouter, Depends

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager
from ..models.generation import LessonPlanResponse
from src.flows.lesson_plan import LessonPlannerFlow
from src.flows.types import LessonPlanInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/generate", response_model=LessonPlanResponse)
async def generate_lesson_plan(
    request: LessonPlanInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    """Time-structured lesson plan, broken down by level, from a weekly syllabus."""
    result = await run_flow(LessonPlannerFlow(model_manager), request)
    return LessonPlanResponse(success=True, message="Lesson plan generated successfully", data=result)
