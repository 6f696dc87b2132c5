"""
Process-local state shared across requests.

Queued questions and game sessions live in memory for the lifetime of the
process; the ModelManager is created once in the app lifespan.
"""

from src.flows.ask_later_queue import QuestionQueue
from src.games.session import GameSession
from src.models.manager import ModelManager
from src.utils.session_store import SessionStore

# Global instances
question_queue = QuestionQueue()
game_sessions: SessionStore[GameSession] = SessionStore(session_timeout_minutes=120)

# FastAPI dependency functions
def get_question_queue() -> QuestionQueue:
    return question_queue

def get_game_sessions() -> SessionStore[GameSession]:
    return game_sessions

def get_model_manager() -> ModelManager:
    """FastAPI dependency to get the model manager from app state."""
    from ..main import app_state
    return app_state["model_manager"]
