"""
Documents feature: plain-text extraction from uploaded files.

  .pdf               → PyPDFLoader (pages joined by newline)
  .docx              → python-docx paragraphs
  .csv               → CSVLoader (one row per line)
  .jpg / .jpeg / .png → Google Cloud Vision OCR (first annotation only)
"""

import asyncio
import json
import logging
import os
from typing import Protocol

from study_companion.core.exceptions import ExtractionFailed, UnsupportedFileType

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}


class OcrClient(Protocol):
    """Anything able to detect text blocks in an image file."""

    def detect_text(self, file_path: str) -> list[str]:
        """Return detected text blocks; the first one is the full text."""
        ...


class GoogleVisionOcr:
    """OCR through the Google Cloud Vision `text_detection` feature."""

    def __init__(self, credentials_json: str = ""):
        self.credentials_json = credentials_json
        self._client = None

    def _get_client(self):
        if self._client is None:
            from google.cloud import vision
            from google.oauth2 import service_account

            if self.credentials_json:
                info = json.loads(self.credentials_json)
                credentials = service_account.Credentials.from_service_account_info(info)
                self._client = vision.ImageAnnotatorClient(credentials=credentials)
            else:
                # Falls back to GOOGLE_APPLICATION_CREDENTIALS / ambient credentials
                self._client = vision.ImageAnnotatorClient()
        return self._client

    def detect_text(self, file_path: str) -> list[str]:
        from google.cloud import vision

        with open(file_path, "rb") as f:
            image = vision.Image(content=f.read())

        response = self._get_client().text_detection(image=image)
        if response.error.message:
            raise RuntimeError(response.error.message)
        return [annotation.description for annotation in response.text_annotations]


# ── Format loaders (blocking, run in a worker thread) ────

def _load_pdf(file_path: str) -> str:
    from langchain_community.document_loaders import PyPDFLoader

    docs = PyPDFLoader(file_path).load()
    return "\n".join(doc.page_content for doc in docs)


def _load_docx(file_path: str) -> str:
    import docx

    document = docx.Document(file_path)
    return "\n".join(para.text for para in document.paragraphs if para.text.strip())


def _load_csv(file_path: str) -> str:
    from langchain_community.document_loaders import CSVLoader

    docs = CSVLoader(file_path, encoding="utf-8").load()
    return "\n".join(doc.page_content for doc in docs)


LOADERS = {
    ".pdf": _load_pdf,
    ".docx": _load_docx,
    ".csv": _load_csv,
}


class ContentExtractor:
    """Converts a file on disk into plain text, dispatching on its extension."""

    def __init__(self, ocr: OcrClient, timeout: float | None = None):
        self.ocr = ocr
        self.timeout = timeout

    async def extract(self, file_path: str, declared_extension: str | None = None) -> str:
        """Extract plain text from a file.

        Args:
            file_path: Path of the file on disk.
            declared_extension: Extension to dispatch on (e.g. ".pdf"); taken
                from `file_path` when omitted.

        Returns:
            The extracted text ("" for images without detectable text).

        Raises:
            UnsupportedFileType: If the extension has no extractor.
            ExtractionFailed: If OCR fails.
        """
        extension = (declared_extension or os.path.splitext(file_path)[1]).lower()
        if extension and not extension.startswith("."):
            extension = f".{extension}"

        loader = LOADERS.get(extension)
        if loader is not None:
            text = await self._run_blocking(loader, file_path)
            logger.info(f"📄 Extracted {len(text)} chars from {os.path.basename(file_path)}")
            return text

        if extension in IMAGE_EXTENSIONS:
            return await self._extract_image(file_path)

        raise UnsupportedFileType(extension)

    async def _extract_image(self, file_path: str) -> str:
        try:
            blocks = await self._run_blocking(self.ocr.detect_text, file_path)
        except Exception as e:
            logger.error(f"❌ Error in OCR for {file_path}: {e}")
            raise ExtractionFailed("Failed to extract text from image") from None

        if not blocks:
            return ""
        return blocks[0] or ""

    async def _run_blocking(self, func, *args):
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.timeout)
