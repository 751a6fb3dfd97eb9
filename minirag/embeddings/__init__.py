"""Text embedding module."""

from minirag.embeddings.service import Embedder, HashingEmbedder, fnv1a_32

__all__ = [
    "Embedder",
    "HashingEmbedder",
    "fnv1a_32",
]
