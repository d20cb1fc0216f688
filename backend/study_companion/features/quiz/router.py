"""
Quiz feature: API routes for quiz generation and evaluation.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from study_companion.core.dependencies import get_quiz_service
from study_companion.core.exceptions import AppBaseError
from study_companion.features.quiz.schemas import (
    QuizEvaluateRequest,
    QuizEvaluateResponse,
    QuizGenerateRequest,
    QuizGenerateResponse,
)
from study_companion.features.quiz.service import QuizService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate", response_model=QuizGenerateResponse, response_model_by_alias=True)
async def generate_quiz(
    data: QuizGenerateRequest,
    service: QuizService = Depends(get_quiz_service),
):
    """Generate a quiz for a processed document. Answers are withheld."""
    if not data.document_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"status": "error", "message": "documentId is required"},
        )

    try:
        quiz_id, questions = await service.generate(data.document_id)
    except AppBaseError:
        raise
    except Exception as e:
        logger.error(f"❌ Error generating quiz: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": str(e) or "Error generating quiz"},
        )
    return QuizGenerateResponse(quiz_id=quiz_id, quiz=service.public_view(questions))


@router.post("/evaluate", response_model=QuizEvaluateResponse, response_model_by_alias=True)
async def evaluate_quiz(
    data: QuizEvaluateRequest,
    service: QuizService = Depends(get_quiz_service),
):
    """Score submitted answers against the stored quiz."""
    logger.debug(f"Attempting to evaluate quiz with ID: {data.quiz_id}")
    if not data.quiz_id or data.answers is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"status": "error", "message": "Valid quizId and answers array are required"},
        )

    evaluation = service.evaluate(data.quiz_id, data.answers)
    return QuizEvaluateResponse(evaluation=evaluation)
