"""
OpenAI model factory.

Models are built from the current `Credentials`, so keys set at runtime via
/api/set-credentials take effect on the next build:
  LLM_MODEL=gpt-4o-mini
  EMBEDDING_MODEL=text-embedding-3-small
"""

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from study_companion.config import Settings
from study_companion.core.credentials import Credentials

# Temperatures used by the workflows
DETERMINISTIC = 0.0
CREATIVE = 0.7


class LLMProvider:
    """Builds chat and embedding clients for the configured OpenAI account."""

    def __init__(self, settings: Settings, credentials: Credentials):
        self.settings = settings
        self.credentials = credentials

    @property
    def revision(self) -> int:
        """Changes whenever the clients built by this provider go stale."""
        return self.credentials.revision

    def create_chat_model(self, temperature: float = DETERMINISTIC) -> BaseChatModel:
        """Create a chat model instance.

        Args:
            temperature: 0 for deterministic tool sequencing, 0.7 for creative answers.

        Returns:
            BaseChatModel: A LangChain-compatible chat model.

        Raises:
            CredentialMissing: If no OpenAI key has been configured.
        """
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=self.settings.LLM_MODEL,
            api_key=self.credentials.get_openai_key(),
            temperature=temperature,
            timeout=self.settings.EXTERNAL_CALL_TIMEOUT,
        )

    def create_embeddings(self) -> Embeddings:
        """Create an embedding model instance.

        Raises:
            CredentialMissing: If no OpenAI key has been configured.
        """
        from langchain_openai import OpenAIEmbeddings

        return OpenAIEmbeddings(
            model=self.settings.EMBEDDING_MODEL,
            api_key=self.credentials.get_openai_key(),
            request_timeout=self.settings.EXTERNAL_CALL_TIMEOUT,
        )
