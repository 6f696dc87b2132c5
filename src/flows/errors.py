"""
Error translation for generation flows.

Provider failures are turned into a single user-facing ``FlowError``. The only
classification is a substring check for the backend being busy; everything
else becomes the flow's generic failure message.
"""

from src.models.providers.base import ModelBusy

BUSY_MARKERS = ("503", "overloaded")
BUSY_MESSAGE = "The AI model is currently busy. Please try again in a moment."


class FlowError(RuntimeError):
    """A flow failed in a way the user should be told about."""

    def __init__(self, message: str, busy: bool = False):
        super().__init__(message)
        self.message = message
        self.busy = busy


def is_busy_error(exc: BaseException) -> bool:
    if isinstance(exc, ModelBusy):
        return True
    text = str(exc).lower()
    return any(marker in text for marker in BUSY_MARKERS)


def translate_error(exc: BaseException, failure_message: str, busy_message: str = BUSY_MESSAGE) -> FlowError:
    if isinstance(exc, FlowError):
        return exc
    if is_busy_error(exc):
        return FlowError(busy_message, busy=True)
    return FlowError(failure_message)
