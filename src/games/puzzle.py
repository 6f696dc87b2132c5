"""Word scramble rounds."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import random

PUZZLES_PER_ROUND = 5
POINTS_PER_PUZZLE = 10

WORDS = [
    # 3-4 letters
    "cat", "dog", "sun", "run", "cup", "egg", "pen", "bed", "tree", "moon",
    # 5-6 letters
    "apple", "house", "water", "earth", "train", "smile", "happy", "cloud", "school", "friend",
    # 6+ letters
    "banana", "orange", "purple", "window", "teacher", "student", "computer", "learning", "puzzle", "journey",
]


@dataclass
class Puzzle:
    word: str
    hint: str
    scrambled: str


def words_for_level(level: int) -> List[str]:
    if level < 3:
        return [w for w in WORDS if len(w) <= 4]
    if level < 6:
        return [w for w in WORDS if 5 <= len(w) <= 6]
    return [w for w in WORDS if len(w) > 6]


def scramble_word(word: str, rng: Optional[random.Random] = None) -> str:
    """Shuffle letters; differs from the word whenever that is possible."""
    rng = rng or random.Random()
    if len(set(word)) < 2:
        return word
    letters = list(word)
    while True:
        rng.shuffle(letters)
        scrambled = "".join(letters)
        if scrambled != word:
            return scrambled


def generate_puzzles(level: int, rng: Optional[random.Random] = None) -> List[Puzzle]:
    rng = rng or random.Random()
    candidates = words_for_level(level)
    selected = rng.sample(candidates, min(PUZZLES_PER_ROUND, len(candidates)))

    while len(selected) < PUZZLES_PER_ROUND:
        fallback = rng.choice(WORDS)
        if fallback not in selected:
            selected.append(fallback)

    return [Puzzle(word=w, hint=f"A {len(w)}-letter word.", scrambled=scramble_word(w, rng)) for w in selected]


@dataclass
class PuzzleRound:
    puzzles: List[Puzzle]
    current_index: int = 0

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.puzzles)

    @property
    def score(self) -> int:
        # awarded for finishing the whole round
        return len(self.puzzles) * POINTS_PER_PUZZLE if self.is_complete else 0

    def guess(self, guess: str) -> Dict[str, Any]:
        if self.is_complete:
            raise ValueError("Puzzle round is already complete")
        puzzle = self.puzzles[self.current_index]
        correct = guess.strip().lower() == puzzle.word.lower()
        if correct:
            self.current_index += 1
        return {"correct": correct}

    def state(self) -> Dict[str, Any]:
        current = None if self.is_complete else self.puzzles[self.current_index]
        return {
            "puzzle_number": min(self.current_index + 1, len(self.puzzles)),
            "total_puzzles": len(self.puzzles),
            "puzzle": None if current is None else {"scrambled": current.scrambled, "hint": current.hint},
            "score": self.score,
            "is_complete": self.is_complete,
        }
