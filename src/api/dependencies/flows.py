"""Running flows from request handlers."""

from typing import Any, Dict, Union
import logging

from fastapi import HTTPException
from pydantic import BaseModel

from src.flows.base import Flow
from src.flows.errors import FlowError

logger = logging.getLogger(__name__)


def flow_http_error(error: FlowError) -> HTTPException:
    # busy backends are a retry-later condition, anything else is an upstream failure
    status_code = 503 if error.busy else 502
    return HTTPException(status_code=status_code, detail=error.message)


async def run_flow(flow: Flow, payload: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
    try:
        return await flow.run(payload)
    except FlowError as e:
        logger.warning(f"{flow.name} failed: {e.message}")
        raise flow_http_error(e) from e
