"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "study-companion"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    CORS_ORIGINS: str = "*"  # comma-separated

    # ── Credentials (can be replaced at runtime via /api/set-credentials) ──
    OPENAI_API_KEY: str = ""
    PINECONE_API_KEY: str = ""
    PINECONE_INDEX_NAME: str = "study-companion-db"
    GOOGLE_APPLICATION_CREDENTIALS_JSON: str = ""  # service account JSON for Vision OCR

    # ── LLM / Embedding ──────────────────────────────────
    LLM_MODEL: str = "gpt-4o-mini"
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_BATCH_SIZE: int = 50

    # ── Uploads ──────────────────────────────────────────
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_FILES: int = 5

    # ── Chunking ─────────────────────────────────────────
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200

    # ── Retrieval ────────────────────────────────────────
    QUERY_TOP_K: int = 3
    QUIZ_CONTENT_TOP_K: int = 10
    RETRY_MAX_ATTEMPTS: int = 5
    RETRY_INITIAL_DELAY: float = 1.0  # seconds, doubled on every retry
    INDEX_PROPAGATION_DELAY: float = 2.0  # pause between files of one upload

    # ── Agent ────────────────────────────────────────────
    AGENT_MAX_TOOL_CYCLES: int = 10
    EXTERNAL_CALL_TIMEOUT: float = 60.0  # seconds per model / index / OCR call

    # ── Quiz ─────────────────────────────────────────────
    QUIZ_QUESTION_COUNT: int = 2

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
