"""
Gamified learning endpoints.

A session tracks one player's run through a game across levels. Moves are
applied to the current round; a finished round banks its score once.
"""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies.session import get_game_sessions
from ..models.games import GameOption, GameListResponse, StartGameRequest, GameMoveRequest, GameStateData, GameStateResponse
from src.games.memory import MemoryRound
from src.games.puzzle import PuzzleRound
from src.games.quiz import QuizRound
from src.games.session import GameSession, GAME_TITLES
from src.utils.session_store import SessionStore

router = APIRouter()


def _require_session(session_id: str, sessions: SessionStore[GameSession]) -> GameSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Game session {session_id} not found")
    return session

def _state_response(session_id: str, session: GameSession, message: str, move_result=None) -> GameStateResponse:
    return GameStateResponse(
        success=True,
        message=message,
        data=GameStateData(session_id=session_id, state=session.state(), move_result=move_result)
    )


@router.get("/", response_model=GameListResponse)
async def list_games():
    return GameListResponse(
        success=True,
        data=[GameOption(type=t, title=title, description=desc) for t, (title, desc) in GAME_TITLES.items()]
    )

@router.post("/sessions", response_model=GameStateResponse, status_code=201)
async def start_game(request: StartGameRequest, sessions: SessionStore[GameSession] = Depends(get_game_sessions)):
    session = GameSession.start(request.game_type)
    session_id = sessions.create(session)
    return _state_response(session_id, session, "Game started")

@router.get("/sessions/{session_id}", response_model=GameStateResponse)
async def get_game(session_id: str, sessions: SessionStore[GameSession] = Depends(get_game_sessions)):
    return _state_response(session_id, _require_session(session_id, sessions), "Current game state")

@router.post("/sessions/{session_id}/move", response_model=GameStateResponse)
async def make_move(
    session_id: str,
    request: GameMoveRequest,
    sessions: SessionStore[GameSession] = Depends(get_game_sessions)
):
    session = _require_session(session_id, sessions)
    current = session.round

    try:
        if isinstance(current, QuizRound):
            if request.option is None:
                raise HTTPException(status_code=422, detail="Quiz moves need an 'option'")
            result = current.answer(request.option)
        elif isinstance(current, PuzzleRound):
            if request.guess is None:
                raise HTTPException(status_code=422, detail="Word scramble moves need a 'guess'")
            result = current.guess(request.guess)
        elif isinstance(current, MemoryRound):
            if request.index is None:
                raise HTTPException(status_code=422, detail="Memory moves need an 'index'")
            result = current.flip(request.index)
        else:
            raise HTTPException(status_code=409, detail="No round in progress")
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    message = "Round complete" if session.record_progress() else "Move applied"
    return _state_response(session_id, session, message, move_result=result)

@router.post("/sessions/{session_id}/play-again", response_model=GameStateResponse)
async def play_again(session_id: str, sessions: SessionStore[GameSession] = Depends(get_game_sessions)):
    session = _require_session(session_id, sessions)
    session.play_again()
    return _state_response(session_id, session, "New round started")

@router.post("/sessions/{session_id}/next-level", response_model=GameStateResponse)
async def next_level(session_id: str, sessions: SessionStore[GameSession] = Depends(get_game_sessions)):
    session = _require_session(session_id, sessions)
    session.next_level()
    return _state_response(session_id, session, f"Level {session.level} started")

@router.delete("/sessions/{session_id}", response_model=GameStateResponse)
async def end_game(session_id: str, sessions: SessionStore[GameSession] = Depends(get_game_sessions)):
    session = _require_session(session_id, sessions)
    sessions.delete(session_id)
    return _state_response(session_id, session, "Session ended")
