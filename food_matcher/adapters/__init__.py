"""Adapters for optional external capabilities (embedding providers)."""
from .embedding_gateway import (
    EmbeddingCache,
    EmbeddingGateway,
    NullEmbeddingGateway,
    OpenAIEmbeddingGateway,
    SentenceTransformerEmbeddingGateway,
    cosine_similarity,
    create_embedding_gateway,
)

__all__ = [
    "EmbeddingCache",
    "EmbeddingGateway",
    "NullEmbeddingGateway",
    "OpenAIEmbeddingGateway",
    "SentenceTransformerEmbeddingGateway",
    "cosine_similarity",
    "create_embedding_gateway",
]
