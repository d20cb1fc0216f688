"""
Custom exception classes for unified error handling.
"""

from fastapi import status


class AppBaseError(Exception):
    """Base exception for all application errors."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


# ── Documents ────────────────────────────────────────────

class UnsupportedFileType(AppBaseError):
    """Raised when no extractor exists for a file extension."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(
            message=f"Unsupported file type: {extension}",
            detail="Supported types: .pdf, .docx, .csv, .jpg, .jpeg, .png",
        )


class ExtractionFailed(AppBaseError):
    """Raised when a file could be read but its text could not be extracted."""

    def __init__(self, message: str = "Failed to extract text from image"):
        super().__init__(message=message)


class IndexUnavailable(AppBaseError):
    """Raised when the vector index (or its embedding service) cannot be reached."""

    def __init__(self, operation: str, original_error: str):
        self.operation = operation
        super().__init__(
            message=f"Vector index unavailable during {operation}",
            detail=original_error,
        )


class MaxRetriesExceeded(AppBaseError):
    """Raised when a retried operation kept failing on every attempt."""

    def __init__(self, attempts: int, last_error: str):
        self.attempts = attempts
        super().__init__(
            message=f"Max retries reached after {attempts} attempts",
            detail=last_error,
        )


# ── Agent ────────────────────────────────────────────────

class ToolInputInvalid(AppBaseError):
    """Tool arguments failed validation. Rendered back to the model, never raised to callers."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, tool_name: str, errors: str):
        self.tool_name = tool_name
        super().__init__(
            message=f"Invalid input for tool '{tool_name}'",
            detail=errors,
        )


class ToolCycleLimitExceeded(AppBaseError):
    """Raised when the model keeps requesting tools past the configured cap."""

    def __init__(self, workflow: str, limit: int):
        super().__init__(
            message=f"Workflow '{workflow}' exceeded {limit} tool cycles",
        )


# ── Quiz ─────────────────────────────────────────────────

class QuizFormatInvalid(AppBaseError):
    """Raised when the model output is not a valid quiz. `raw` is kept for logs only."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(
            message="Failed to parse quiz response. The model returned invalid JSON.",
        )


class QuizNotFound(AppBaseError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, quiz_id: str, available: list[str] | None = None):
        self.quiz_id = quiz_id
        super().__init__(
            message=f"Quiz not found. Available quizzes: {', '.join(available or [])}",
        )


class AnswerCountMismatch(AppBaseError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, expected: int, received: int):
        super().__init__(
            message="Number of answers must match number of questions",
            detail=f"expected {expected}, received {received}",
        )


class InvalidAnswerToken(AppBaseError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, token: object):
        super().__init__(
            message="All answers must be one of: A, B, C, or D",
            detail=f"got {token!r}",
        )


# ── Configuration ────────────────────────────────────────

class CredentialMissing(AppBaseError):
    """Raised when an API key or index name was never configured."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"{name} not set",
            detail="Configure it via environment or POST /api/set-credentials.",
        )
