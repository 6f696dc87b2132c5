"""
FastAPI application entry point.

This is the main FastAPI application that coordinates all API routes and middleware.
It serves as the bridge between HTTP requests and the generation flows.
"""

import os
import logging
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

from .routers import health, knowledge, lesson_plans, worksheets, content, visual_aids, speech, ask_later, role_play, games
from src.models.manager import ModelManager

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Global application state
app_state = {}

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    The ModelManager is created once at startup; provider clients are
    created lazily on first use and released at shutdown.
    """
    load_dotenv()
    config_path = Path(os.getenv("SAHAYAK_CONFIG", DEFAULT_CONFIG_PATH))
    logger.info(f"Starting Sahayak API server with config {config_path}")

    model_manager = ModelManager(config_path=config_path)
    app_state["model_manager"] = model_manager
    logger.info("ModelManager initialized, API server ready to accept requests")

    yield  # Server runs here

    logger.info("Shutting down Sahayak API server")
    model_manager.cleanup()
    app_state.clear()

def create_app() -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.
    """
    app = FastAPI(
        title="Sahayak API",
        description="AI co-teacher: stories, worksheets, lesson plans, role-plays, speech, visual aids and learning games",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:9002", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(knowledge.router, prefix="/api/v1/knowledge", tags=["knowledge"])
    app.include_router(lesson_plans.router, prefix="/api/v1/lesson-plans", tags=["lesson-plans"])
    app.include_router(worksheets.router, prefix="/api/v1/worksheets", tags=["worksheets"])
    app.include_router(content.router, prefix="/api/v1/content", tags=["content"])
    app.include_router(visual_aids.router, prefix="/api/v1/visual-aids", tags=["visual-aids"])
    app.include_router(speech.router, prefix="/api/v1/speech", tags=["speech"])
    app.include_router(ask_later.router, prefix="/api/v1/ask-later", tags=["ask-later"])
    app.include_router(role_play.router, prefix="/api/v1/role-play", tags=["role-play"])
    app.include_router(games.router, prefix="/api/v1/games", tags=["games"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": "Sahayak API",
            "version": "1.0.0",
            "status": "operational",
            "endpoints": {
                "health": "/health",
                "knowledge": "/api/v1/knowledge",
                "lesson_plans": "/api/v1/lesson-plans",
                "worksheets": "/api/v1/worksheets",
                "content": "/api/v1/content",
                "visual_aids": "/api/v1/visual-aids",
                "speech": "/api/v1/speech",
                "ask_later": "/api/v1/ask-later",
                "role_play": "/api/v1/role-play",
                "games": "/api/v1/games",
                "docs": "/docs",
            }
        }

    return app

# Create the FastAPI app instance
app = create_app()
