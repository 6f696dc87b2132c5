"""
A player's run through one game: level, running score and the current round.

Rounds are rebuilt on play-again and next-level; a completed round's score
is added to the running total exactly once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union
import random

from .levels import difficulty_for_level
from .memory import MemoryRound, generate_memory_items
from .puzzle import PuzzleRound, generate_puzzles
from .quiz import QuizRound, generate_quiz_questions


class GameType(str, Enum):
    QUIZ = "quiz"
    PUZZLE = "puzzle"
    MEMORY = "memory"


GAME_TITLES = {
    GameType.QUIZ: ("Math Quiz", "Solve quick math problems."),
    GameType.PUZZLE: ("Word Scramble", "Unscramble letters to find the word."),
    GameType.MEMORY: ("Memory Match", "Find all the matching pairs."),
}

GameRound = Union[QuizRound, PuzzleRound, MemoryRound]


def build_round(game_type: GameType, level: int, rng: random.Random) -> GameRound:
    if game_type == GameType.QUIZ:
        return QuizRound(questions=generate_quiz_questions(level, rng))
    if game_type == GameType.PUZZLE:
        return PuzzleRound(puzzles=generate_puzzles(level, rng))
    return MemoryRound(items=generate_memory_items(level, rng))


@dataclass
class GameSession:
    game_type: GameType
    level: int = 1
    score: int = 0
    last_game_score: int = 0
    is_game_completed: bool = False
    round: Optional[GameRound] = None
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def start(cls, game_type: GameType, rng: Optional[random.Random] = None) -> "GameSession":
        session = cls(game_type=GameType(game_type), rng=rng or random.Random())
        session.play_again()
        return session

    def play_again(self):
        self.round = build_round(self.game_type, self.level, self.rng)
        self.is_game_completed = False
        self.last_game_score = 0

    def next_level(self):
        self.level += 1
        self.play_again()

    def record_progress(self) -> bool:
        """Bank the round's score once it completes. True when this call banked it."""
        if self.round is None or self.is_game_completed or not self.round.is_complete:
            return False
        self.last_game_score = self.round.score
        self.score += self.last_game_score
        self.is_game_completed = True
        return True

    def state(self) -> Dict[str, Any]:
        return {
            "game_type": self.game_type.value,
            "level": self.level,
            "difficulty": difficulty_for_level(self.level).value,
            "score": self.score,
            "last_game_score": self.last_game_score,
            "is_game_completed": self.is_game_completed,
            "round": self.round.state() if self.round else None,
        }
