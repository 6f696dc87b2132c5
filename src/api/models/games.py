"""
API models for the learning games.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .common import APIResponse
from src.games.session import GameType


class GameOption(BaseModel):
    type: GameType
    title: str
    description: str

class GameListResponse(APIResponse):
    data: List[GameOption] = Field(default_factory=list)

class StartGameRequest(BaseModel):
    game_type: GameType = Field(..., description="quiz, puzzle or memory")

class GameMoveRequest(BaseModel):
    """One move in the current round; which field is used depends on the game."""
    option: Optional[int] = Field(None, description="Chosen quiz option")
    guess: Optional[str] = Field(None, description="Word scramble guess")
    index: Optional[int] = Field(None, ge=0, description="Memory card position to flip")

class GameStateData(BaseModel):
    session_id: str
    state: Dict[str, Any]
    move_result: Optional[Dict[str, Any]] = None

class GameStateResponse(APIResponse):
    data: Optional[GameStateData] = None
