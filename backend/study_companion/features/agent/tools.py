"""
Agent feature: the closed set of tools the workflows can call.

Each tool is one `ToolName` member with a typed pydantic input model.
`Toolbox.dispatch` validates the raw arguments against that model and then
matches on the tool name to run the handler.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, Field, ValidationError

from study_companion.core.exceptions import ToolInputInvalid
from study_companion.core.llm_provider import CREATIVE, LLMProvider
from study_companion.core.retry import with_retry
from study_companion.features.agent.messages import message_text
from study_companion.features.agent.prompts import DIRECT_CHAT_SYSTEM_PROMPT
from study_companion.features.documents.chunker import TextChunker
from study_companion.features.documents.extractor import ContentExtractor
from study_companion.features.documents.vector_index import VectorIndexGateway

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    EXTRACT_CONTENT = "extract_content"
    SPLIT_TEXT = "split_text"
    SAVE_TO_PINECONE = "save_to_pinecone"
    QUERY_PINECONE = "query_pinecone"
    DIRECT_CHAT = "direct_chat"
    FETCH_DOCUMENT_CONTENT = "fetch_document_content"


# ── Tool inputs ──────────────────────────────────────────

class ExtractContentInput(BaseModel):
    file_path: str = Field(..., min_length=1, description="Path of the uploaded file")


class SplitTextInput(BaseModel):
    content: str = Field(..., description="Full text to split into chunks")


class SaveToPineconeInput(BaseModel):
    chunks: list[str] = Field(..., description="Chunk texts in document order")
    document_id: str = Field(..., min_length=1)
    metadata: dict[str, str | int | float | bool] | None = None


class QueryPineconeInput(BaseModel):
    query: str = Field(..., description="What to look for")
    document_id: str = Field(..., min_length=1)


class DirectChatInput(BaseModel):
    query: str = Field(..., min_length=1)


class FetchDocumentContentInput(BaseModel):
    document_id: str = Field(..., min_length=1)


@dataclass(frozen=True)
class ToolSpec:
    name: ToolName
    description: str
    input_model: type[BaseModel]

    def openai_schema(self) -> dict:
        """Function-calling schema passed to `bind_tools`."""
        return {
            "type": "function",
            "function": {
                "name": self.name.value,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }


TOOL_SPECS: dict[ToolName, ToolSpec] = {
    spec.name: spec
    for spec in [
        ToolSpec(ToolName.EXTRACT_CONTENT, "Extract text content from an uploaded file", ExtractContentInput),
        ToolSpec(ToolName.SPLIT_TEXT, "Split text content into chunks", SplitTextInput),
        ToolSpec(ToolName.SAVE_TO_PINECONE, "Save content chunks to Pinecone vector store", SaveToPineconeInput),
        ToolSpec(ToolName.QUERY_PINECONE, "Query Pinecone vector store for relevant content", QueryPineconeInput),
        ToolSpec(
            ToolName.DIRECT_CHAT,
            "Have a direct conversation with ChatGPT without using document context",
            DirectChatInput,
        ),
        ToolSpec(
            ToolName.FETCH_DOCUMENT_CONTENT,
            "Fetch document content from Pinecone by documentId",
            FetchDocumentContentInput,
        ),
    ]
}

PROCESSING_TOOLS = (ToolName.EXTRACT_CONTENT, ToolName.SPLIT_TEXT, ToolName.SAVE_TO_PINECONE)
QUERYING_TOOLS = (ToolName.QUERY_PINECONE, ToolName.DIRECT_CHAT)
QUIZ_TOOLS = (ToolName.FETCH_DOCUMENT_CONTENT,)


class Toolbox:
    """Handlers for every tool, sharing the external clients they need."""

    def __init__(
        self,
        extractor: ContentExtractor,
        chunker: TextChunker,
        index: VectorIndexGateway,
        llm_provider: LLMProvider,
        query_top_k: int = 3,
        quiz_content_top_k: int = 10,
        retry_attempts: int = 5,
        retry_initial_delay: float = 1.0,
    ):
        self.extractor = extractor
        self.chunker = chunker
        self.index = index
        self.llm_provider = llm_provider
        self.query_top_k = query_top_k
        self.quiz_content_top_k = quiz_content_top_k
        self.retry_attempts = retry_attempts
        self.retry_initial_delay = retry_initial_delay

    @staticmethod
    def validate(name: ToolName, args: dict[str, Any]) -> BaseModel:
        """Parse raw model arguments into the tool's input model.

        Raises:
            ToolInputInvalid: If the arguments do not match the schema.
        """
        try:
            return TOOL_SPECS[name].input_model.model_validate(args)
        except ValidationError as e:
            raise ToolInputInvalid(name.value, str(e)) from e

    async def dispatch(self, name: ToolName, args: dict[str, Any]) -> str:
        """Validate arguments and run the matching handler."""
        payload = self.validate(name, args)

        match name:
            case ToolName.EXTRACT_CONTENT:
                return await self.extract_content(payload)
            case ToolName.SPLIT_TEXT:
                return await self.split_text(payload)
            case ToolName.SAVE_TO_PINECONE:
                return await self.save_to_pinecone(payload)
            case ToolName.QUERY_PINECONE:
                return await self.query_pinecone(payload)
            case ToolName.DIRECT_CHAT:
                return await self.direct_chat(payload)
            case ToolName.FETCH_DOCUMENT_CONTENT:
                return await self.fetch_document_content(payload)

    # ── Handlers ─────────────────────────────────────────

    async def extract_content(self, args: ExtractContentInput) -> str:
        return await self.extractor.extract(args.file_path)

    async def split_text(self, args: SplitTextInput) -> str:
        return json.dumps(self.chunker.split(args.content), ensure_ascii=False)

    async def save_to_pinecone(self, args: SaveToPineconeInput) -> str:
        count = await self.index.upsert(args.chunks, args.document_id, args.metadata)
        return f"Successfully saved {count} chunks to Pinecone with documentId: {args.document_id}"

    async def query_pinecone(self, args: QueryPineconeInput) -> str:
        matches = await self._search_with_retry(args.query, args.document_id, self.query_top_k)
        return json.dumps([m.to_dict() for m in matches], ensure_ascii=False)

    async def direct_chat(self, args: DirectChatInput) -> str:
        return await self.answer_directly(args.query)

    async def fetch_document_content(self, args: FetchDocumentContentInput) -> str:
        matches = await self._search_with_retry("", args.document_id, self.quiz_content_top_k)
        return "\n\n".join(m.content for m in matches)

    # ── Shared helpers ───────────────────────────────────

    async def answer_directly(self, query: str) -> str:
        """Answer with the creative model and no document context."""
        model = self.llm_provider.create_chat_model(temperature=CREATIVE)
        response = await model.ainvoke([
            SystemMessage(content=DIRECT_CHAT_SYSTEM_PROMPT),
            HumanMessage(content=query),
        ])
        return message_text(response)

    async def _search_with_retry(self, query: str, document_id: str, k: int):
        return await with_retry(
            lambda: self.index.search(query, document_id, k),
            max_attempts=self.retry_attempts,
            initial_delay=self.retry_initial_delay,
        )
