"""
Google Generative AI embedding service.

Wraps GoogleGenerativeAIEmbeddings with a fixed output dimensionality so
every vector matches the index, and retries transient API failures.

Dependencies: langchain_google_genai, tenacity
System role: Text to embedding vector adapter
"""

import logging

from langchain_google_genai import GoogleGenerativeAIEmbeddings
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential_jitter

from cardbase.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

# Cards and queries are compared symmetrically (dedup and search share vectors)
TASK_TYPE = "SEMANTIC_SIMILARITY"


class EmbeddingService:
    """
    Text embedding generator with fixed output dimensionality.

    Attributes:
        dimension: Length of every returned vector
    """

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        dimension: int = 1536,
        max_retries: int = 3,
        embeddings: GoogleGenerativeAIEmbeddings | None = None,
    ) -> None:
        """
        Initialize the Gemini embeddings client.

        Args:
            model: Google embedding model ID
            dimension: Output dimensionality requested on every call
            max_retries: Attempts per call before giving up
            embeddings: Pre-built LangChain embeddings client (tests, reuse)
        """
        self.dimension = dimension
        self._model = model
        self._max_retries = max_retries
        self._embeddings = embeddings or GoogleGenerativeAIEmbeddings(model=model)
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, dimension={dimension}"
        )

    @property
    def langchain_embeddings(self) -> GoogleGenerativeAIEmbeddings:
        """Underlying LangChain embeddings (used by the FAISS wrapper)."""
        return self._embeddings

    async def embed(self, text: str) -> list[float]:
        """
        Embed a text.

        Args:
            text: Card content or search query

        Returns:
            list[float]: Embedding of length ``dimension``

        Raises:
            EmbeddingError: After retries are exhausted or on a dimension mismatch
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential_jitter(initial=0.5, max=8),
                reraise=True,
            ):
                with attempt:
                    vector = await self._embeddings.aembed_query(
                        text,
                        task_type=TASK_TYPE,
                        output_dimensionality=self.dimension,
                    )
        except Exception as e:
            logger.error(
                f"{__name__}:embed - {type(e).__name__}: {e}",
                extra={"model": self._model, "text_length": len(text)},
            )
            raise EmbeddingError(
                "Failed to generate embedding",
                operation="embed",
                details={"error": str(e), "model": self._model},
            ) from e

        if len(vector) != self.dimension:
            raise EmbeddingError(
                "Embedding dimension mismatch",
                operation="embed",
                details={"expected": self.dimension, "actual": len(vector)},
            )
        return list(vector)
