"""Vector store module."""

from minirag.vectorstore.locks import ReadWriteLock
from minirag.vectorstore.models import SearchResult, StoreSnapshot
from minirag.vectorstore.service import InMemoryVectorStore, VectorStore

__all__ = [
    "InMemoryVectorStore",
    "ReadWriteLock",
    "SearchResult",
    "StoreSnapshot",
    "VectorStore",
]
