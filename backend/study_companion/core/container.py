"""
Composition root: every long-lived component is built here, once, at startup.
"""

from dataclasses import dataclass

from study_companion.config import Settings
from study_companion.core.credentials import Credentials
from study_companion.core.llm_provider import CREATIVE, DETERMINISTIC, LLMProvider
from study_companion.features.agent.graph import AgentWorkflow
from study_companion.features.agent.tools import PROCESSING_TOOLS, QUERYING_TOOLS, QUIZ_TOOLS, Toolbox
from study_companion.features.documents.chunker import TextChunker
from study_companion.features.documents.extractor import ContentExtractor, GoogleVisionOcr, OcrClient
from study_companion.features.documents.pipeline import DocumentPipeline
from study_companion.features.documents.vector_index import VectorIndexGateway, create_pinecone_index
from study_companion.features.quiz.generator import QuizGenerator
from study_companion.features.quiz.service import QuizService
from study_companion.features.quiz.store import QuizStore


@dataclass
class ServiceContainer:
    settings: Settings
    credentials: Credentials
    pipeline: DocumentPipeline
    quiz_service: QuizService

    @classmethod
    def build(
        cls,
        settings: Settings,
        credentials: Credentials | None = None,
        llm_provider: LLMProvider | None = None,
        ocr: OcrClient | None = None,
        index_factory=create_pinecone_index,
    ) -> "ServiceContainer":
        """Wire the application. Optional arguments replace the real external clients."""
        credentials = credentials or Credentials.from_settings(settings)
        llm_provider = llm_provider or LLMProvider(settings, credentials)
        timeout = settings.EXTERNAL_CALL_TIMEOUT

        extractor = ContentExtractor(
            ocr or GoogleVisionOcr(settings.GOOGLE_APPLICATION_CREDENTIALS_JSON),
            timeout=timeout,
        )
        chunker = TextChunker(settings.CHUNK_SIZE, settings.CHUNK_OVERLAP)
        index = VectorIndexGateway(
            credentials,
            embeddings_factory=llm_provider.create_embeddings,
            index_factory=index_factory,
            batch_size=settings.EMBEDDING_BATCH_SIZE,
            timeout=timeout,
        )
        toolbox = Toolbox(
            extractor,
            chunker,
            index,
            llm_provider,
            query_top_k=settings.QUERY_TOP_K,
            quiz_content_top_k=settings.QUIZ_CONTENT_TOP_K,
            retry_attempts=settings.RETRY_MAX_ATTEMPTS,
            retry_initial_delay=settings.RETRY_INITIAL_DELAY,
        )

        # ── Workflows ────────────────────────────────────
        max_cycles = settings.AGENT_MAX_TOOL_CYCLES
        processing = AgentWorkflow("processing", llm_provider, toolbox, PROCESSING_TOOLS, DETERMINISTIC, max_cycles)
        querying = AgentWorkflow("querying", llm_provider, toolbox, QUERYING_TOOLS, DETERMINISTIC, max_cycles)
        quiz = AgentWorkflow("quiz", llm_provider, toolbox, QUIZ_TOOLS, CREATIVE, max_cycles)

        pipeline = DocumentPipeline(extractor, chunker, index, toolbox, processing, querying)
        quiz_service = QuizService(QuizGenerator(quiz, settings.QUIZ_QUESTION_COUNT), QuizStore())

        return cls(
            settings=settings,
            credentials=credentials,
            pipeline=pipeline,
            quiz_service=quiz_service,
        )
