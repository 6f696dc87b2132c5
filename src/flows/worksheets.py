from src.models.providers.base import ModelError
from .base import Flow, structured
from .types import WorksheetInput, WorksheetOutput


class DifferentiatedWorksheetFlow(Flow):
    """Easy, intermediate and advanced worksheets from one photographed textbook page."""

    name = "differentiated_worksheets"
    input_model = WorksheetInput
    output_model = WorksheetOutput
    failure_message = "An unexpected error occurred while generating worksheets. Please try again."

    async def execute(self, flow_input: WorksheetInput) -> WorksheetOutput:
        return await self.primary(self._worksheets, flow_input.textbook_page_photo_data_uri)

    def _worksheets(self, photo_data_uri: str) -> WorksheetOutput:
        response = self.model_manager.call(
            task="worksheets",
            prompt_ref="worksheets/differentiate@v1",
            variables={},
            schema=WorksheetOutput,
            images=[photo_data_uri],
        )
        worksheets = structured(response, WorksheetOutput)
        if not all([worksheets.easy_worksheet, worksheets.intermediate_worksheet, worksheets.advanced_worksheet]):
            raise ModelError("The model failed to generate all three worksheets.")
        return worksheets
