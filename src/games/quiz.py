"""Math quiz rounds: five arithmetic questions scaled to the level."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import random

QUESTIONS_PER_ROUND = 5
POINTS_PER_CORRECT = 10
OPTION_COUNT = 4
OPERATORS = ["+", "-", "*", "/"]


@dataclass
class QuizQuestion:
    question_text: str
    options: List[int]
    correct_answer: int
    type: str = "math"


def _make_question(level: int, rng: random.Random) -> QuizQuestion:
    operator = rng.choice(OPERATORS)
    max_num = level * 5

    if operator == "+":
        num1, num2 = rng.randint(1, max_num), rng.randint(1, max_num)
        correct, text = num1 + num2, f"What is {num1} + {num2}?"
    elif operator == "-":
        a, b = rng.randint(1, max_num), rng.randint(1, max_num)
        num1, num2 = max(a, b), min(a, b)
        correct, text = num1 - num2, f"What is {num1} - {num2}?"
    elif operator == "*":
        num1, num2 = rng.randint(1, level + 4), rng.randint(1, 9)
        correct, text = num1 * num2, f"What is {num1} × {num2}?"
    else:
        # built backwards so the division is exact
        result, num2 = rng.randint(1, level + 2), rng.randint(2, 9)
        num1 = result * num2
        correct, text = result, f"What is {num1} ÷ {num2}?"

    options = {correct}
    while len(options) < OPTION_COUNT:
        candidate = correct + rng.randint(-5, 4)
        if candidate >= 0 and candidate != correct:
            options.add(candidate)
    shuffled = list(options)
    rng.shuffle(shuffled)

    return QuizQuestion(question_text=text, options=shuffled, correct_answer=correct)


def generate_quiz_questions(level: int, rng: Optional[random.Random] = None) -> List[QuizQuestion]:
    rng = rng or random.Random()
    return [_make_question(level, rng) for _ in range(QUESTIONS_PER_ROUND)]


@dataclass
class QuizRound:
    questions: List[QuizQuestion]
    current_index: int = 0
    correct_count: int = 0
    answers: List[bool] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.questions)

    @property
    def score(self) -> int:
        return self.correct_count * POINTS_PER_CORRECT

    def answer(self, option: int) -> Dict[str, Any]:
        if self.is_complete:
            raise ValueError("Quiz is already complete")
        question = self.questions[self.current_index]
        is_correct = option == question.correct_answer
        if is_correct:
            self.correct_count += 1
        self.answers.append(is_correct)
        self.current_index += 1
        return {"correct": is_correct, "correct_answer": question.correct_answer}

    def state(self) -> Dict[str, Any]:
        current = None if self.is_complete else self.questions[self.current_index]
        return {
            "question_number": min(self.current_index + 1, len(self.questions)),
            "total_questions": len(self.questions),
            "question": None if current is None else {"question_text": current.question_text, "options": current.options},
            "score": self.score,
            "is_complete": self.is_complete,
        }
