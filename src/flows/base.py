from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union
import asyncio
import logging

from pydantic import BaseModel

from src.models.manager import ModelManager
from src.models.providers.base import ModelError, ModelResponse
from .errors import BUSY_MESSAGE, translate_error

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = "https://placehold.co/512x288.png"

T = TypeVar("T")
SchemaT = TypeVar("SchemaT", bound=BaseModel)


def structured(response: ModelResponse, schema: Type[SchemaT]) -> SchemaT:
    """Return the schema-validated payload of a response or raise ModelError."""
    if isinstance(response.parsed, schema):
        return response.parsed
    reason = response.meta.get("validation_error", "empty response")
    raise ModelError(f"Response did not match {schema.__name__}: {reason}")


async def settle(*calls: Callable[[], Any], limit: Optional[int] = None) -> List[Any]:
    """
    Run blocking calls concurrently; each slot holds a result or the exception it raised.

    ``limit`` caps how many calls are in flight at once.
    """
    semaphore = asyncio.Semaphore(limit) if limit else None

    async def run(call: Callable[[], Any]) -> Any:
        if semaphore is None:
            return await asyncio.to_thread(call)
        async with semaphore:
            return await asyncio.to_thread(call)

    return await asyncio.gather(*(run(call) for call in calls), return_exceptions=True)


def or_fallback(result: Union[T, BaseException], fallback: T, label: str) -> T:
    if isinstance(result, BaseException):
        logger.error(f"{label} failed, using fallback: {result}")
        return fallback
    if not result:
        logger.warning(f"{label} returned nothing, using fallback")
        return fallback
    return result


class Flow(ABC):
    """
    A named generation flow: validated input, one critical generation call,
    optional non-critical calls with fallbacks, validated output.
    """

    name: str = "flow"
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    failure_message: str = "Generation failed. Please try again."
    busy_message: str = BUSY_MESSAGE

    def __init__(self, model_manager: ModelManager):
        self.model_manager = model_manager

    async def run(self, payload: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
        if isinstance(payload, self.input_model):
            flow_input = payload
        else:
            flow_input = self.input_model.model_validate(payload)
        logger.info(f"Running {self.name}")
        result = await self.execute(flow_input)
        return self.output_model.model_validate(result)

    @abstractmethod
    async def execute(self, flow_input: BaseModel) -> BaseModel:
        raise NotImplementedError

    async def primary(self, call: Callable[..., T], *args, **kwargs) -> T:
        """Run the call the flow cannot do without; failures become a FlowError."""
        try:
            return await asyncio.to_thread(call, *args, **kwargs)
        except Exception as e:
            logger.error(f"{self.name} generation failed: {e}")
            raise translate_error(e, self.failure_message, self.busy_message) from e
