from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def difficulty_for_level(level: int) -> Difficulty:
    if level < 4:
        return Difficulty.BEGINNER
    if level < 8:
        return Difficulty.INTERMEDIATE
    return Difficulty.ADVANCED
