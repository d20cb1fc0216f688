"""
Quiz feature: process-lifetime quiz storage.

Quizzes live in memory only and are lost on restart.
"""

import logging
import uuid

from study_companion.core.exceptions import QuizNotFound
from study_companion.features.quiz.schemas import QuizQuestion

logger = logging.getLogger(__name__)


def new_quiz_id() -> str:
    return f"quiz_{uuid.uuid4().hex[:8]}"


class QuizStore:
    """Quizzes keyed by an opaque id. Last write wins."""

    def __init__(self):
        self._quizzes: dict[str, tuple[QuizQuestion, ...]] = {}

    def save(self, questions: list[QuizQuestion], quiz_id: str | None = None) -> str:
        quiz_id = quiz_id or new_quiz_id()
        self._quizzes[quiz_id] = tuple(questions)
        logger.debug(f"Stored quiz with ID: {quiz_id} ({len(self._quizzes)} in storage)")
        return quiz_id

    def get(self, quiz_id: str) -> tuple[QuizQuestion, ...]:
        """Raises QuizNotFound for unknown ids."""
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFound(quiz_id, self.ids())
        return quiz

    def ids(self) -> list[str]:
        return list(self._quizzes)

    def __len__(self) -> int:
        return len(self._quizzes)
