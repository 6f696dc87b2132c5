from src.models.providers.base import ModelError
from .base import Flow, structured
from .types import KnowledgeInput, KnowledgeOutput, AnswerSchema


class KnowledgeAssistantFlow(Flow):
    """Answers a student's question in their language, always with an analogy."""

    name = "knowledge_assistant"
    input_model = KnowledgeInput
    output_model = KnowledgeOutput
    failure_message = "Failed to get an answer. Please try again."

    async def execute(self, flow_input: KnowledgeInput) -> KnowledgeOutput:
        answer = await self.primary(self._answer, flow_input)
        return KnowledgeOutput(answer=answer)

    def _answer(self, flow_input: KnowledgeInput) -> str:
        response = self.model_manager.call(
            task="knowledge",
            prompt_ref="knowledge/answer@v1",
            variables={"question": flow_input.question, "language": flow_input.language},
            schema=AnswerSchema,
        )
        answer = structured(response, AnswerSchema).answer.strip()
        if not answer:
            raise ModelError("The model failed to generate a response.")
        return answer
