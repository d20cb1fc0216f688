"""
Quiz feature: Schemas for quiz content and request/response models.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

AnswerLetter = Literal["A", "B", "C", "D"]
ANSWER_LETTERS = ("A", "B", "C", "D")


class QuizOptions(BaseModel):
    A: str
    B: str
    C: str
    D: str


class QuizQuestion(BaseModel):
    """One generated question, including its answer key."""
    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: QuizOptions
    correct_answer: AnswerLetter = Field(..., alias="correctAnswer")
    explanation: str


class PublicQuestion(BaseModel):
    """What the user sees: no answer key, no explanation."""
    question: str
    options: QuizOptions


class QuestionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    selected_answer: AnswerLetter = Field(..., serialization_alias="selectedAnswer")
    correct_answer: AnswerLetter = Field(..., serialization_alias="correctAnswer")
    is_correct: bool = Field(..., serialization_alias="isCorrect")
    explanation: str


class QuizEvaluation(BaseModel):
    score: int
    total: int
    percentage: float
    results: list[QuestionResult]


# ── Requests / Responses ─────────────────────────────────

class QuizGenerateRequest(BaseModel):
    document_id: str | None = Field(None, alias="documentId")


class QuizGenerateResponse(BaseModel):
    status: str = "success"
    quiz_id: str = Field(..., serialization_alias="quizId")
    quiz: list[PublicQuestion]


class QuizEvaluateRequest(BaseModel):
    quiz_id: str | None = Field(None, alias="quizId")
    answers: list[Any] | None = None  # tokens are checked by the evaluator


class QuizEvaluateResponse(BaseModel):
    status: str = "success"
    evaluation: QuizEvaluation
