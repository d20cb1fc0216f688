"""
Quiz feature: Service layer tying generation, storage and evaluation together.

Flow: generate (agent) → store (answer key kept server-side) → evaluate
"""

import logging

from study_companion.features.quiz.evaluator import evaluate_quiz
from study_companion.features.quiz.generator import QuizGenerator
from study_companion.features.quiz.schemas import PublicQuestion, QuizEvaluation, QuizQuestion
from study_companion.features.quiz.store import QuizStore

logger = logging.getLogger(__name__)


class QuizService:
    """Quiz lifecycle operations."""

    def __init__(self, generator: QuizGenerator, store: QuizStore):
        self.generator = generator
        self.store = store

    async def generate(self, document_id: str) -> tuple[str, list[QuizQuestion]]:
        """Generate and store a quiz. Returns (quiz_id, questions with answer key)."""
        questions = await self.generator.generate(document_id)
        quiz_id = self.store.save(questions)
        logger.info(f"✅ Stored quiz {quiz_id} ({len(questions)} questions) for {document_id}")
        return quiz_id, questions

    @staticmethod
    def public_view(questions: list[QuizQuestion]) -> list[PublicQuestion]:
        """Strip answer key and explanations."""
        return [PublicQuestion(question=q.question, options=q.options) for q in questions]

    def evaluate(self, quiz_id: str, answers: list) -> QuizEvaluation:
        """Score answers for a stored quiz.

        Raises:
            QuizNotFound, AnswerCountMismatch, InvalidAnswerToken
        """
        questions = self.store.get(quiz_id)
        evaluation = evaluate_quiz(questions, answers)
        logger.info(f"📊 Evaluated quiz {quiz_id}: {evaluation.score}/{evaluation.total}")
        return evaluation
