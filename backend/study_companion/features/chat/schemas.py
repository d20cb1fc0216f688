"""
Chat feature: Schemas for the multi-file chat response.
"""

from pydantic import BaseModel


class ProcessedFile(BaseModel):
    """Outcome of processing one uploaded file."""
    documentId: str
    fileName: str
    status: str  # success | error
    message: str | None = None


class DocumentQueryResult(BaseModel):
    """Answer for one document (possibly built from several files)."""
    status: str
    message: str
    fileNames: list[str]
    documentId: str
