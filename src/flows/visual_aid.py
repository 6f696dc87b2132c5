from urllib.parse import urlencode

from src.utils.image_converter import to_data_uri
from .base import Flow
from .types import VisualAidInput, VisualAidOutput

IMAGE_SEARCH_URL = "https://www.google.com/search"


def sketch_prompt(subject: str) -> str:
    return (
        f"A simple, clear line drawing of: {subject}. "
        "Draw it like a teacher would on a blackboard: bold white chalk-style strokes on a plain dark background, "
        "few details, easy for students to copy. Label parts only with short single words where essential."
    )


def image_search_url(query: str) -> str:
    """Large-image web search link for a query."""
    return f"{IMAGE_SEARCH_URL}?{urlencode({'tbm': 'isch', 'q': query, 'tbs': 'isz:l'}, safe=':')}"


class VisualAidFlow(Flow):
    """Blackboard-friendly sketch for a topic; the image itself is the result."""

    name = "visual_aid"
    input_model = VisualAidInput
    output_model = VisualAidOutput
    failure_message = "Failed to generate visual aid. Please try again."

    async def execute(self, flow_input: VisualAidInput) -> VisualAidOutput:
        media_url = await self.primary(self._sketch, flow_input.prompt)
        return VisualAidOutput(media_url=media_url)

    def _sketch(self, subject: str) -> str:
        image = self.model_manager.generate_image("sketch", sketch_prompt(subject))
        return to_data_uri(image.data, image.mime_type)
