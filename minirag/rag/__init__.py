"""RAG pipeline module."""

from minirag.rag.fallback import generate_fallback_answer
from minirag.rag.models import AnswerGenerator, RAGQuery, RAGResponse, SourceAttribution
from minirag.rag.pipeline import RAGPipeline

__all__ = [
    "AnswerGenerator",
    "RAGPipeline",
    "RAGQuery",
    "RAGResponse",
    "SourceAttribution",
    "generate_fallback_answer",
]
