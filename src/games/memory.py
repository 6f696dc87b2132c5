"""Memory match rounds: flip two cards per turn, find every pair."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import random

ICONS = ["dog", "cat", "tree", "sun", "star", "moon", "car", "bus", "house", "boat", "fish", "bird"]
MIN_PAIRS = 3
MAX_PAIRS = 8
MAX_SCORE = 100
TURN_PENALTY = 5
MIN_SCORE = 10


@dataclass
class CardItem:
    id: str
    type: str


def pair_count(level: int) -> int:
    return min(max(level + 1, MIN_PAIRS), MAX_PAIRS)


def generate_memory_items(level: int, rng: Optional[random.Random] = None) -> List[CardItem]:
    rng = rng or random.Random()
    selected = ICONS[:pair_count(level)]
    items = selected + selected
    rng.shuffle(items)
    return [CardItem(id=f"{icon}-{index}", type=icon) for index, icon in enumerate(items)]


@dataclass
class MemoryRound:
    items: List[CardItem]
    flipped: List[int] = field(default_factory=list)
    matched_pairs: List[str] = field(default_factory=list)
    turns: int = 0

    @property
    def is_complete(self) -> bool:
        return len(self.matched_pairs) > 0 and len(self.matched_pairs) == len(self.items) // 2

    @property
    def score(self) -> int:
        if not self.is_complete:
            return 0
        return max(MAX_SCORE - self.turns * TURN_PENALTY, MIN_SCORE)

    def flip(self, index: int) -> Dict[str, Any]:
        """
        Turn a card face up. The second card of a turn resolves it: the pair
        is matched or both go face down again. Flips that cannot count
        (finished round, matched card, card already up) are ignored.
        """
        if not 0 <= index < len(self.items):
            raise IndexError(f"No card at position {index}")
        if self.is_complete or index in self.flipped or self.items[index].type in self.matched_pairs:
            return {"accepted": False, "revealed": [], "matched": None}

        self.flipped.append(index)
        if len(self.flipped) < 2:
            return {"accepted": True, "revealed": [self._reveal(index)], "matched": None}

        first, second = self.flipped
        self.flipped = []
        self.turns += 1
        matched = self.items[first].type == self.items[second].type
        if matched:
            self.matched_pairs.append(self.items[first].type)
        return {"accepted": True, "revealed": [self._reveal(first), self._reveal(second)], "matched": matched}

    def _reveal(self, index: int) -> Dict[str, Any]:
        return {"index": index, "id": self.items[index].id, "type": self.items[index].type}

    def state(self) -> Dict[str, Any]:
        return {
            "cards": [
                {"id": item.id, "type": item.type if item.type in self.matched_pairs or i in self.flipped else None}
                for i, item in enumerate(self.items)
            ],
            "turns": self.turns,
            "matched_pairs": list(self.matched_pairs),
            "score": self.score,
            "is_complete": self.is_complete,
        }
