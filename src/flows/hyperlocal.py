import asyncio
import logging

from src.models.providers.base import ModelError
from src.utils.image_converter import to_data_uri
from .base import Flow, PLACEHOLDER_IMAGE_URL, structured
from .types import HyperlocalInput, HyperlocalOutput, StorySchema, VisualPromptSchema

logger = logging.getLogger(__name__)

FALLBACK_VISUAL_PROMPT = "A beautiful and vibrant illustration for a children's story, in a culturally relevant style."

ILLUSTRATION_STYLE = (
    "The style should be a high-quality, photorealistic image that vividly illustrates a children's story. "
    "The image should be vibrant, clear, and engaging for kids.\n"
    "IMPORTANT: Do not include any text, words, or letters in the image. The image must be purely visual."
)


def illustration_prompt(visual_prompt: str) -> str:
    return f"{visual_prompt.strip().rstrip('.')}.\n{ILLUSTRATION_STYLE}"


class HyperlocalContentFlow(Flow):
    """
    Culturally relevant story in the requested language with a matching illustration.

    The story is required. The illustration goes through two dependent steps:
    a purely visual prompt is derived from the story, then rendered. Either
    step failing degrades the illustration, never the story.
    """

    name = "hyperlocal_content"
    input_model = HyperlocalInput
    output_model = HyperlocalOutput
    failure_message = "Failed to generate a story. Please try again."

    async def execute(self, flow_input: HyperlocalInput) -> HyperlocalOutput:
        story = await self.primary(self._story, flow_input)

        try:
            visual_prompt = await asyncio.to_thread(self._visual_prompt, story)
        except Exception as e:
            logger.warning(f"Visual prompt generation failed, using fallback: {e}")
            visual_prompt = FALLBACK_VISUAL_PROMPT

        try:
            image_url = await asyncio.to_thread(self._illustrate, visual_prompt)
        except Exception as e:
            logger.warning(f"Image generation failed, using placeholder: {e}")
            image_url = PLACEHOLDER_IMAGE_URL

        return HyperlocalOutput(story=story, image_url=image_url)

    def _story(self, flow_input: HyperlocalInput) -> str:
        response = self.model_manager.call(
            task="story",
            prompt_ref="story/hyperlocal@v1",
            variables={"prompt": flow_input.prompt, "language": flow_input.language},
            schema=StorySchema,
        )
        story = structured(response, StorySchema).story.strip()
        if not story:
            raise ModelError("Failed to generate a story.")
        return story

    def _visual_prompt(self, story: str) -> str:
        response = self.model_manager.call(
            task="visual_prompt",
            prompt_ref="story/visual_prompt@v1",
            variables={"story": story},
            schema=VisualPromptSchema,
        )
        visual_prompt = structured(response, VisualPromptSchema).visual_prompt.strip()
        if not visual_prompt:
            raise ModelError("Could not derive a visual prompt from the story.")
        return visual_prompt

    def _illustrate(self, visual_prompt: str) -> str:
        image = self.model_manager.generate_image("image", illustration_prompt(visual_prompt))
        return to_data_uri(image.data, image.mime_type)
