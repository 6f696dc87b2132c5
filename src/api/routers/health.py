"""
Health check endpoints for monitoring and diagnostics.
"""

import time
from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from ..models.common import HealthStatus
from ..dependencies.session import get_model_manager, get_question_queue, get_game_sessions
from src.flows.ask_later_queue import QuestionQueue
from src.games.session import GameSession
from src.models.manager import ModelManager
from src.utils.session_store import SessionStore

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()

API_VERSION = "1.0.0"

@router.get("/", response_model=HealthStatus)
async def health_check(
    queue: QuestionQueue = Depends(get_question_queue),
    game_sessions: SessionStore[GameSession] = Depends(get_game_sessions),
    model_manager: ModelManager = Depends(get_model_manager)
):
    """
    Basic health check endpoint.

    Reports the in-memory stores and the configured generation tasks. Does
    not call the generative backends.
    """
    uptime = time.time() - _server_start_time
    dependencies = {}

    try:
        dependencies["question_queue"] = f"Active ({len(queue.list())} questions)"
    except Exception as e:
        dependencies["question_queue"] = f"Error: {e}"

    try:
        dependencies["game_sessions"] = f"Active ({game_sessions.get_stats()['active_sessions']} sessions)"
    except Exception as e:
        dependencies["game_sessions"] = f"Error: {e}"

    try:
        dependencies["model_tasks"] = f"Configured ({len(model_manager.config['tasks'])} tasks)"
    except Exception as e:
        dependencies["model_tasks"] = f"Error: {e}"

    return HealthStatus(
        status="healthy",
        version=API_VERSION,
        uptime=uptime,
        dependencies=dependencies
    )

@router.get("/detailed")
async def detailed_health_check(
    game_sessions: SessionStore[GameSession] = Depends(get_game_sessions),
    model_manager: ModelManager = Depends(get_model_manager)
):
    """Uptime, session counts and per-task call statistics."""
    uptime = time.time() - _server_start_time
    session_stats = game_sessions.get_stats()

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": uptime,
        "uptime_human": f"{uptime//3600:.0f}h {(uptime%3600)//60:.0f}m {uptime%60:.0f}s",
        "game_sessions": {
            "active_count": session_stats["active_sessions"],
            "timeout_minutes": session_stats["timeout_minutes"],
            "oldest_session_age_seconds": session_stats["oldest_session_age"]
        },
        "task_stats": model_manager.get_stats(),
    }

@router.get("/ready")
async def readiness_check(model_manager: ModelManager = Depends(get_model_manager)):
    """
    Readiness probe for container deployments.

    Ready once the model manager is loaded with at least one task.
    """
    if not model_manager.config.get("tasks"):
        return {"ready": False, "reason": "No generation tasks configured"}

    return {"ready": True, "message": "Service ready to handle requests"}
