"""Document processing module."""

from minirag.documents.chunker import ChunkerConfig, SentenceChunker
from minirag.documents.loader import TextFileLoader
from minirag.documents.models import Document, DocumentChunk

__all__ = [
    "ChunkerConfig",
    "Document",
    "DocumentChunk",
    "SentenceChunker",
    "TextFileLoader",
]
