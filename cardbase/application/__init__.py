"""
Application layer: card use case orchestration.

System role: Coordinates metadata store, lexical index, vector index and
embeddings for each card operation
"""
