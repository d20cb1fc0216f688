"""
Chat feature: chat with optional uploaded documents.

Unlike `DocumentPipeline.chat_with_context`, this route keeps partial
results: a file that fails to process or a document that fails to answer is
reported on its own entry while the others go through.
"""

import asyncio
import logging
import os
import re
import time
import unicodedata

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from study_companion.config import Settings
from study_companion.core.dependencies import get_pipeline, get_settings_dep
from study_companion.features.chat.schemas import ProcessedFile, DocumentQueryResult
from study_companion.features.documents.pipeline import DocumentPipeline, new_document_id

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_QUERY = "give brief summary of these files"


def secure_filename(filename: str) -> str:
    """Strip accents and special characters, replace spaces with underscores."""
    filename = unicodedata.normalize('NFKD', filename).encode('ascii', 'ignore').decode('ascii')
    filename = re.sub(r'[^\w\.-]', '_', filename)
    return filename


def _write_file(upload_dir: str, path: str, contents: bytes) -> None:
    os.makedirs(upload_dir, exist_ok=True)
    with open(path, "wb") as f:
        f.write(contents)


async def _save_upload(file: UploadFile, upload_dir: str) -> str:
    path = os.path.join(upload_dir, f"{int(time.time() * 1000)}_{secure_filename(file.filename or 'upload')}")
    contents = await file.read()
    await asyncio.to_thread(_write_file, upload_dir, path, contents)
    return path


def _remove(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        logger.error(f"Error deleting file {path}: {e}")


@router.post("/chat-with-context")
async def chat_with_context(
    files: list[UploadFile] | None = File(None),
    query: str | None = Form(None),
    pipeline: DocumentPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings_dep),
):
    """Answer a query, grounded in the uploaded files when there are any."""
    query = query or DEFAULT_QUERY
    files = [f for f in (files or []) if f.filename]

    if not files:
        logger.info("No files provided, using direct chat")
        result = await pipeline.chat_with_context(query)
        return {"status": result.status, "message": result.message, "type": "direct_chat"}

    if len(files) > settings.MAX_UPLOAD_FILES:
        return JSONResponse(
            status_code=400,
            content={"status": "error", "message": f"At most {settings.MAX_UPLOAD_FILES} files are allowed"},
        )

    logger.info(f"Processing uploaded files: {[f.filename for f in files]}")
    shared_document_id = new_document_id()
    processed: list[ProcessedFile] = []

    # 1. Process files one at a time so the index can keep up
    for file in files:
        path = None
        try:
            path = await _save_upload(file, settings.UPLOAD_DIR)
            result = await pipeline.process_document(path, shared_document_id)
            processed.append(ProcessedFile(
                documentId=result.document_id,
                fileName=file.filename,
                status=result.status,
            ))
            await asyncio.sleep(settings.INDEX_PROPAGATION_DELAY)
        except Exception as e:
            logger.error(f"❌ Error processing file {file.filename}: {e}")
            processed.append(ProcessedFile(
                documentId=shared_document_id,
                fileName=file.filename,
                status="error",
                message=str(e),
            ))
        finally:
            if path:
                await asyncio.to_thread(_remove, path)

    successful = [doc for doc in processed if doc.status == "success"]
    if not successful:
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Failed to process any documents",
                "processedFiles": [p.model_dump(exclude_none=True) for p in processed],
            },
        )

    # 2. Query every distinct document concurrently, isolating failures
    unique_ids = list(dict.fromkeys(doc.documentId for doc in successful))

    async def query_one(document_id: str) -> DocumentQueryResult:
        file_names = [doc.fileName for doc in successful if doc.documentId == document_id]
        try:
            result = await pipeline.query_document(query, document_id)
            return DocumentQueryResult(
                status=result.status, message=result.message, fileNames=file_names, documentId=document_id,
            )
        except Exception as e:
            logger.error(f"❌ Error querying document {document_id}: {e}")
            return DocumentQueryResult(
                status="error", message="Failed to query documents", fileNames=file_names, documentId=document_id,
            )

    results = await asyncio.gather(*(query_one(document_id) for document_id in unique_ids))

    return {
        "status": "success",
        "results": [r.model_dump() for r in results],
        "processedFiles": [p.model_dump(exclude_none=True) for p in processed],
        "type": "document_query",
    }
