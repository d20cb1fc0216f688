"""
Study Companion - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in study_companion/features/ has its own router, service and schemas.
  Long-lived components are built once in the ServiceContainer and shared via app.state.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from study_companion.config import get_settings
from study_companion.core.container import ServiceContainer
from study_companion.core.exceptions import AppBaseError

# ── Feature Routers ──────────────────────────────────────
from study_companion.features.chat.router import router as chat_router
from study_companion.features.quiz.router import router as quiz_router
from study_companion.features.credentials.router import router as credentials_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = app.state.container.settings
    print(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    print(f"🤖 LLM: {settings.LLM_MODEL} | Embeddings: {settings.EMBEDDING_MODEL}")
    print(f"📦 Pinecone index: {settings.PINECONE_INDEX_NAME}")
    yield
    print("👋 Shutting down...")


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Application factory."""
    settings = container.settings if container else get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Document-aware chat and quiz backend",
        lifespan=lifespan,
    )
    app.state.container = container or ServiceContainer.build(settings)

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    )

    # ── Request logging ──────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} → {response.status_code} ({elapsed_ms:.0f}ms)")
        return response

    # ── Error handling ───────────────────────────────────
    @app.exception_handler(AppBaseError)
    async def app_error_handler(request: Request, error: AppBaseError):
        logger.error(f"{type(error).__name__}: {error.message}")
        return JSONResponse(
            status_code=error.status_code,
            content={"status": "error", "message": error.message},
        )

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, error: HTTPException):
        content = error.detail if isinstance(error.detail, dict) else {"status": "error", "message": error.detail}
        return JSONResponse(status_code=error.status_code, content=content, headers=error.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, error: RequestValidationError):
        errors = error.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
        logger.warning(f"{request.method} {request.url.path} rejected: {message}")
        return JSONResponse(status_code=400, content={"status": "error", "message": message})

    # ── Register Feature Routers ─────────────────────────
    app.include_router(chat_router, prefix="/api", tags=["Chat"])
    app.include_router(quiz_router, prefix="/api/quiz", tags=["Quiz"])
    app.include_router(credentials_router, prefix="/api", tags=["Credentials"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
