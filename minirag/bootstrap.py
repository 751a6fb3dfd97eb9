"""Assembles the retrieval components from settings."""

from minirag.config import RetrievalSettings
from minirag.documents.chunker import ChunkerConfig, SentenceChunker
from minirag.embeddings.service import HashingEmbedder
from minirag.retrieval.retriever import Retriever
from minirag.vectorstore.service import InMemoryVectorStore


def create_retriever(settings: RetrievalSettings) -> Retriever:
    """Build an empty retriever configured from ``settings``.

    Raises:
        ConfigurationError: If dimension, chunk size or overlap is invalid.
    """
    embedder = HashingEmbedder(settings.embedding_dimension)
    chunker = SentenceChunker(
        ChunkerConfig(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        )
    )
    return Retriever(InMemoryVectorStore(embedder), chunker)
