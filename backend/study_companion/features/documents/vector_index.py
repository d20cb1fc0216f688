"""
Documents feature: Pinecone gateway for embedded chunks.

Every record carries its text and the documentId it belongs to, so searches
can be restricted to one document with a metadata filter:
  id: random hex   values: embedding
  metadata: {text, documentId, chunkIndex, **caller metadata}

Writes are eventually consistent: a search issued right after `upsert` may
not see the new records yet (callers wrap searches in `with_retry`).
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from langchain_core.embeddings import Embeddings

from study_companion.core.credentials import Credentials
from study_companion.core.exceptions import CredentialMissing, IndexUnavailable

logger = logging.getLogger(__name__)

# Empty strings cannot be embedded; "fetch everything" mode embeds this instead
# and relies on the documentId filter for selection.
FETCH_ALL_QUERY = "main topics and key facts of this document"


@dataclass
class IndexMatch:
    """A single chunk returned by a similarity search."""

    content: str
    document_id: str
    chunk_index: int | None
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "pageContent": self.content,
            "metadata": {**self.metadata, "documentId": self.document_id, "chunkIndex": self.chunk_index},
            "score": round(self.score, 4),
        }


def create_pinecone_index(credentials: Credentials):
    """Open the configured Pinecone index."""
    from pinecone import Pinecone

    client = Pinecone(api_key=credentials.get_pinecone_key())
    return client.Index(credentials.get_pinecone_index_name())


class VectorIndexGateway:
    """Upserts and searches embedded chunks, filtered by documentId."""

    def __init__(
        self,
        credentials: Credentials,
        embeddings_factory: Callable[[], Embeddings],
        index_factory: Callable[[Credentials], Any] = create_pinecone_index,
        batch_size: int = 50,
        timeout: float | None = None,
    ):
        self.credentials = credentials
        self.embeddings_factory = embeddings_factory
        self.index_factory = index_factory
        self.batch_size = batch_size
        self.timeout = timeout
        self._index = None
        self._embeddings = None
        self._revision = -1

    def _clients(self):
        """Index handle and embeddings, rebuilt when credentials change."""
        if self._revision != self.credentials.revision or self._index is None:
            self._embeddings = self.embeddings_factory()
            self._index = self.index_factory(self.credentials)
            self._revision = self.credentials.revision
        return self._index, self._embeddings

    async def upsert(
        self,
        chunks: list[str],
        document_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> int:
        """Embed and store chunks under a documentId.

        Args:
            chunks: Chunk texts, in document order.
            document_id: Id every chunk is grouped under.
            metadata: Extra scalar metadata copied onto every record.

        Returns:
            Number of records written.

        Raises:
            IndexUnavailable: On any embedding or index failure.
        """
        if not chunks:
            return 0

        try:
            index, embeddings = self._clients()
            written = 0
            for start in range(0, len(chunks), self.batch_size):
                batch = chunks[start:start + self.batch_size]
                vectors = await asyncio.wait_for(embeddings.aembed_documents(batch), timeout=self.timeout)
                records = [
                    {
                        "id": uuid.uuid4().hex,
                        "values": vector,
                        "metadata": {
                            **(metadata or {}),
                            "text": text,
                            "documentId": document_id,
                            "chunkIndex": start + offset,
                        },
                    }
                    for offset, (text, vector) in enumerate(zip(batch, vectors, strict=True))
                ]
                await self._call(index.upsert, vectors=records)
                written += len(records)
        except CredentialMissing:
            raise
        except Exception as e:
            logger.error(f"❌ Upsert failed for {document_id}: {e}")
            raise IndexUnavailable("upsert", str(e)) from e

        logger.info(f"✅ Saved {written} chunks to index with documentId: {document_id}")
        return written

    async def search(self, query: str, document_id: str, k: int = 3) -> list[IndexMatch]:
        """Similarity search restricted to one document.

        Args:
            query: Natural language query; "" fetches generic content of the document.
            document_id: Only records with this documentId are considered.
            k: Maximum number of matches.

        Returns:
            Matches sorted by descending similarity.

        Raises:
            IndexUnavailable: On any embedding or index failure.
        """
        try:
            index, embeddings = self._clients()
            vector = await asyncio.wait_for(
                embeddings.aembed_query(query or FETCH_ALL_QUERY), timeout=self.timeout
            )
            response = await self._call(
                index.query,
                vector=vector,
                top_k=k,
                filter={"documentId": {"$eq": document_id}},
                include_metadata=True,
            )
        except CredentialMissing:
            raise
        except Exception as e:
            logger.error(f"❌ Search failed for {document_id}: {e}")
            raise IndexUnavailable("search", str(e)) from e

        matches = [self._to_match(m) for m in (response.matches or [])]
        matches.sort(key=lambda m: m.score, reverse=True)
        logger.debug(f"Search returned {len(matches)} matches (k={k}, documentId={document_id})")
        return matches[:k]

    async def _call(self, func, **kwargs):
        return await asyncio.wait_for(asyncio.to_thread(func, **kwargs), timeout=self.timeout)

    @staticmethod
    def _to_match(raw) -> IndexMatch:
        metadata = dict(raw.metadata or {})
        content = metadata.pop("text", "")
        document_id = metadata.pop("documentId", "")
        chunk_index = metadata.pop("chunkIndex", None)
        return IndexMatch(
            content=content,
            document_id=document_id,
            chunk_index=int(chunk_index) if chunk_index is not None else None,
            score=float(raw.score or 0.0),
            metadata=metadata,
        )
