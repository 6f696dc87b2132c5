from src.models.providers.base import ModelError
from src.utils.image_converter import to_data_uri
from .base import Flow, PLACEHOLDER_IMAGE_URL, or_fallback, settle, structured
from .speech import speak
from .types import AskLaterInput, AskLaterOutput, AnswerSchema


def explainer_image_prompt(question: str) -> str:
    return (
        f"A high-quality, realistic photo that helps explain the answer to the question: '{question}'. "
        "The style should be clear and engaging for a child."
    )


class AskLaterFlow(Flow):
    """
    Full answer for a question a student parked for later: text, an
    explanatory picture and a spoken version of the answer.

    Picture and audio are generated concurrently once the answer exists and
    fall back independently (placeholder image, empty audio).
    """

    name = "ask_later"
    input_model = AskLaterInput
    output_model = AskLaterOutput
    failure_message = "Failed to generate an answer for the question."
    busy_message = "The AI text model is currently busy. Please try again in a moment."

    async def execute(self, flow_input: AskLaterInput) -> AskLaterOutput:
        answer = await self.primary(self._answer, flow_input)

        image_result, audio_result = await settle(
            lambda: self._picture(flow_input.question),
            lambda: speak(self.model_manager, answer),
        )

        return AskLaterOutput(
            answer=answer,
            image_url=or_fallback(image_result, PLACEHOLDER_IMAGE_URL, "Image generation"),
            audio_data_uri=or_fallback(audio_result, "", "Audio generation"),
        )

    def _answer(self, flow_input: AskLaterInput) -> str:
        response = self.model_manager.call(
            task="knowledge",
            prompt_ref="ask_later/answer@v1",
            variables={"question": flow_input.question, "language": flow_input.language},
            schema=AnswerSchema,
        )
        answer = structured(response, AnswerSchema).answer.strip()
        if not answer:
            raise ModelError("Failed to generate a text answer.")
        return answer

    def _picture(self, question: str) -> str:
        image = self.model_manager.generate_image("image", explainer_image_prompt(question))
        return to_data_uri(image.data, image.mime_type)
