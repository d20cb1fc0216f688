"""
Runtime credentials for the external services (OpenAI, Pinecone).

One instance is created in the composition root and handed to every
component that talks to an external service. Values can be replaced at
runtime through POST /api/set-credentials; `revision` increases on every
update so consumers know when to rebuild their clients.
"""

import logging
from dataclasses import dataclass

from study_companion.config import Settings
from study_companion.core.exceptions import CredentialMissing

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """Holder for API keys and the vector index name."""

    openai_api_key: str | None = None
    pinecone_api_key: str | None = None
    pinecone_index_name: str | None = None
    revision: int = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "Credentials":
        return cls(
            openai_api_key=settings.OPENAI_API_KEY or None,
            pinecone_api_key=settings.PINECONE_API_KEY or None,
            pinecone_index_name=settings.PINECONE_INDEX_NAME or None,
        )

    def update(self, openai_api_key: str, pinecone_api_key: str, pinecone_index_name: str) -> None:
        """Replace all three values at once."""
        self.openai_api_key = openai_api_key
        self.pinecone_api_key = pinecone_api_key
        self.pinecone_index_name = pinecone_index_name
        self.revision += 1
        logger.info(f"🔑 Credentials updated (revision {self.revision}, index '{pinecone_index_name}')")

    # ── Getters ──────────────────────────────────────────

    def get_openai_key(self) -> str:
        if not self.openai_api_key:
            raise CredentialMissing("OpenAI API key")
        return self.openai_api_key

    def get_pinecone_key(self) -> str:
        if not self.pinecone_api_key:
            raise CredentialMissing("Pinecone API key")
        return self.pinecone_api_key

    def get_pinecone_index_name(self) -> str:
        if not self.pinecone_index_name:
            raise CredentialMissing("Pinecone index name")
        return self.pinecone_index_name
