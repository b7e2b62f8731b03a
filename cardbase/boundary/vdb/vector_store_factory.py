"""
Vector store factory for selecting between FAISS (dev) and S3 Vectors (prod).

Depends on VECTOR_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: cardbase.boundary.vdb, cardbase.configs
System role: Vector store instantiation and selection
"""

import logging

from cardbase.boundary.vdb.embeddings_wrapper import EmbeddingService
from cardbase.configs import Settings, get_settings
from cardbase.core.worker_pool import WorkerPool

logger = logging.getLogger(__name__)


def get_vector_store(
    worker_pool: WorkerPool,
    embedding_service: EmbeddingService,
    settings: Settings | None = None,
):
    """
    Factory function to get vector store based on environment configuration.

    Args:
        worker_pool: Pool for blocking backend calls
        embedding_service: Embedding service (FAISS needs its LangChain client)
        settings: Application settings (defaults to the cached singleton)

    Returns:
        FAISSVectorsStore or S3VectorsStore: Configured vector store instance

    Raises:
        ValueError: If the store type is invalid
    """
    settings = settings or get_settings()
    config = settings.vector_store
    store_type = config.store_type.lower()

    if store_type == "faiss":
        from cardbase.boundary.vdb.faiss_vectors_store import FAISSVectorsStore

        logger.info(f"{__name__}:get_vector_store - Creating FAISS vector store (local dev mode)")
        return FAISSVectorsStore(
            embeddings=embedding_service.langchain_embeddings,
            worker_pool=worker_pool,
            dimension=settings.embedding.dimension,
            index_dir=config.faiss_index_dir,
            index_name=config.index_name,
            max_top_k=config.max_top_k,
        )

    if store_type == "s3":
        from cardbase.boundary.vdb.s3_vectors_store import S3VectorsStore

        logger.info(f"{__name__}:get_vector_store - Creating S3 Vectors store (production mode)")
        return S3VectorsStore(
            worker_pool=worker_pool,
            vectors_bucket=config.vectors_bucket,
            index_name=config.index_name,
            region=config.aws_region,
            max_top_k=config.max_top_k,
        )

    raise ValueError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        f"Must be 'faiss' (dev) or 's3' (production)."
    )
