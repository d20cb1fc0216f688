"""
Documents feature: process and query documents.

  process_document:  Extract → Chunk → Upsert (direct calls, no agent)
  query_document:    querying workflow, with retrieval when a documentId is given
  chat_with_context: process each file, then query every document concurrently
"""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass

from study_companion.features.agent.graph import AgentWorkflow
from study_companion.features.agent.prompts import (
    DIRECT_QUERY_REQUEST,
    DIRECT_QUERY_SYSTEM_PROMPT,
    PROCESSING_REQUEST,
    PROCESSING_SYSTEM_PROMPT,
    RETRIEVAL_REQUEST,
    RETRIEVAL_SYSTEM_PROMPT,
)
from study_companion.features.agent.tools import Toolbox
from study_companion.features.documents.chunker import TextChunker
from study_companion.features.documents.extractor import ContentExtractor
from study_companion.features.documents.vector_index import VectorIndexGateway

logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return f"doc_{uuid.uuid4().hex[:8]}"


@dataclass
class ProcessResult:
    status: str
    document_id: str
    message: str | None = None


@dataclass
class QueryResult:
    status: str
    message: str


class DocumentPipeline:
    """Stable process/query contract over the extractor, chunker, index and workflows."""

    def __init__(
        self,
        extractor: ContentExtractor,
        chunker: TextChunker,
        index: VectorIndexGateway,
        toolbox: Toolbox,
        processing_workflow: AgentWorkflow,
        querying_workflow: AgentWorkflow,
    ):
        self.extractor = extractor
        self.chunker = chunker
        self.index = index
        self.toolbox = toolbox
        self.processing_workflow = processing_workflow
        self.querying_workflow = querying_workflow

    async def process_document(self, file_path: str, document_id: str | None = None) -> ProcessResult:
        """Extract, chunk and index one file.

        Args:
            file_path: Path of the file on disk.
            document_id: Id to group the chunks under; generated when omitted.

        Returns:
            ProcessResult with status "success" and the documentId used.

        Raises:
            Whatever the first failing step raises (no partial success).
        """
        document_id = document_id or new_document_id()
        logger.info(f"🚀 Processing document: {file_path} with ID: {document_id}")

        content = await self.extractor.extract(file_path)
        chunks = self.chunker.split(content)
        logger.info(f"✂️ Split {os.path.basename(file_path)} into {len(chunks)} chunks")

        await self.index.upsert(chunks, document_id)
        return ProcessResult(status="success", document_id=document_id)

    async def process_document_with_agent(self, file_path: str, document_id: str | None = None) -> ProcessResult:
        """Let the processing workflow sequence extract → split → save itself."""
        document_id = document_id or new_document_id()
        logger.info(f"🤖 Agent-processing document: {file_path} with ID: {document_id}")

        message = await self.processing_workflow.run(
            PROCESSING_SYSTEM_PROMPT,
            PROCESSING_REQUEST.format(file_path=file_path, document_id=document_id),
        )
        return ProcessResult(status="success", document_id=document_id, message=message)

    async def query_document(self, query: str, document_id: str | None = None) -> QueryResult:
        """Answer a query, grounded in one document when `document_id` is given."""
        if document_id:
            logger.info(f"🔎 Querying document: {document_id} with query: {query}")
            system_prompt = RETRIEVAL_SYSTEM_PROMPT
            request = RETRIEVAL_REQUEST.format(query=query, document_id=document_id)
        else:
            logger.info(f"💬 Direct chat query: {query}")
            system_prompt = DIRECT_QUERY_SYSTEM_PROMPT
            request = DIRECT_QUERY_REQUEST.format(query=query)

        message = await self.querying_workflow.run(system_prompt, request)
        return QueryResult(status="success", message=message)

    async def direct_chat(self, query: str) -> str:
        return await self.toolbox.answer_directly(query)

    async def chat_with_context(self, query: str, file_paths: list[str] | None = None) -> QueryResult:
        """Process every file into its own document and answer the query against each.

        Files are processed one at a time; the per-document queries then run
        concurrently. Any failure turns the whole call into an error result.
        """
        if not query:
            return QueryResult(status="error", message="Query is required")

        try:
            if not file_paths:
                return QueryResult(status="success", message=await self.direct_chat(query))

            document_ids = []
            for file_path in file_paths:
                result = await self.process_document(file_path, new_document_id())
                document_ids.append(result.document_id)

            results = await asyncio.gather(
                *(self.query_document(query, document_id) for document_id in document_ids)
            )
            return QueryResult(status="success", message="\n\n".join(r.message for r in results))

        except Exception as e:
            logger.error(f"❌ Error in chat with context: {e}")
            return QueryResult(status="error", message=str(e) or "An unexpected error occurred")
