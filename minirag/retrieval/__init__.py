"""Retrieval facade module."""

from minirag.retrieval.retriever import Retriever

__all__ = [
    "Retriever",
]
