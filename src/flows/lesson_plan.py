from src.models.providers.base import ModelError
from .base import Flow
from .types import LessonPlanInput, LessonPlanOutput


class LessonPlannerFlow(Flow):
    name = "lesson_planner"
    input_model = LessonPlanInput
    output_model = LessonPlanOutput
    failure_message = "An unexpected error occurred while generating the lesson plan. Please try again."

    async def execute(self, flow_input: LessonPlanInput) -> LessonPlanOutput:
        lesson_plan = await self.primary(self._plan, flow_input.weekly_syllabus)
        return LessonPlanOutput(lesson_plan=lesson_plan)

    def _plan(self, weekly_syllabus: str) -> str:
        # free text, no schema
        response = self.model_manager.call(
            task="lesson_plan",
            prompt_ref="lesson_plan/generate@v1",
            variables={"weekly_syllabus": weekly_syllabus},
        )
        if not response.content.strip():
            raise ModelError("The model returned an empty lesson plan.")
        return response.content
