"""
FastAPI dependency injection functions.
"""

from fastapi import Request

from study_companion.config import Settings
from study_companion.core.container import ServiceContainer
from study_companion.core.credentials import Credentials
from study_companion.features.documents.pipeline import DocumentPipeline
from study_companion.features.quiz.service import QuizService


def get_container(request: Request) -> ServiceContainer:
    """Dependency: the container built at startup."""
    return request.app.state.container


def get_settings_dep(request: Request) -> Settings:
    return get_container(request).settings


def get_pipeline(request: Request) -> DocumentPipeline:
    return get_container(request).pipeline


def get_quiz_service(request: Request) -> QuizService:
    return get_container(request).quiz_service


def get_credentials(request: Request) -> Credentials:
    return get_container(request).credentials
