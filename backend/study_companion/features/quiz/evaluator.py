"""
Quiz feature: score submitted answers against the stored answer key.
"""

from collections.abc import Sequence
from typing import Any

from study_companion.core.exceptions import AnswerCountMismatch, InvalidAnswerToken
from study_companion.features.quiz.schemas import (
    ANSWER_LETTERS,
    QuestionResult,
    QuizEvaluation,
    QuizQuestion,
)


def evaluate_quiz(questions: Sequence[QuizQuestion], answers: Sequence[Any]) -> QuizEvaluation:
    """Compare answers to the answer key, question by question.

    Raises:
        AnswerCountMismatch: If the number of answers differs from the number of questions.
        InvalidAnswerToken: If an answer is not one of A, B, C, D.
    """
    if len(answers) != len(questions):
        raise AnswerCountMismatch(len(questions), len(answers))

    for answer in answers:
        if answer not in ANSWER_LETTERS:
            raise InvalidAnswerToken(answer)

    results = [
        QuestionResult(
            question=q.question,
            selected_answer=answer,
            correct_answer=q.correct_answer,
            is_correct=answer == q.correct_answer,
            explanation=q.explanation,
        )
        for q, answer in zip(questions, answers)
    ]
    score = sum(1 for r in results if r.is_correct)
    total = len(results)

    return QuizEvaluation(
        score=score,
        total=total,
        percentage=round(100 * score / total, 2) if total else 0.0,
        results=results,
    )
