"""
Vector database boundary layer.

Provides the vector index backends and the embedding service.
- FAISSVectorsStore: Local development index (LangChain FAISS)
- S3VectorsStore: Production Amazon S3 Vectors index (boto3)
- EmbeddingService: Gemini embeddings with fixed dimensionality

Dependencies: langchain_community, langchain_google_genai, boto3
System role: Vector store adapter for dedup and semantic retrieval
"""

from cardbase.boundary.vdb.vector_schemas import (
    StoredPoint,
    VectorHit,
    VectorIndex,
    VectorPoint,
    VectorQueryFilter,
    build_payload,
)

__all__ = [
    "StoredPoint",
    "VectorHit",
    "VectorIndex",
    "VectorPoint",
    "VectorQueryFilter",
    "build_payload",
]
