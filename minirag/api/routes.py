"""API routes for retrieval and question answering."""

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from minirag.exceptions import ErrorCode, RetrievalError
from minirag.logging_config import get_logger
from minirag.rag.models import RAGQuery, RAGResponse
from minirag.rag.pipeline import RAGPipeline
from minirag.retrieval.retriever import Retriever

logger = get_logger(__name__)


router = APIRouter(prefix="/api/v1", tags=["RAG"])


class QueryRequest(BaseModel):
    """Request body for RAG query."""

    question: str = Field(min_length=1, description="Question to answer")
    top_k: int = Field(default=3, ge=1, le=20, description="Number of chunks")
    score_threshold: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Minimum relevance score",
    )


class QueryResponse(BaseModel):
    """Response from RAG query."""

    answer: str = Field(description="Generated answer")
    sources: list[dict[str, Any]] = Field(description="Source attributions")
    model: str | None = Field(description="Model used, if any")
    generator: str = Field(description="llm or fallback")


class SearchRequest(BaseModel):
    """Request body for raw chunk search."""

    query: str = Field(description="Query text")
    top_k: int = Field(default=3, ge=0, le=100, description="Number of chunks")


class SearchHit(BaseModel):
    """One chunk returned by search."""

    id: str = Field(description="Chunk identifier")
    filename: str = Field(description="Source file name")
    content: str = Field(description="Chunk text")
    metadata: dict[str, str] = Field(description="Chunk metadata")
    score: float = Field(description="Cosine similarity")


class SearchResponse(BaseModel):
    """Response from raw chunk search."""

    results: list[SearchHit] = Field(description="Chunks, best first")


def get_pipeline(request: Request) -> RAGPipeline:
    """Resolve the pipeline wired at startup."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise RetrievalError(
            "RAG pipeline not configured",
            code=ErrorCode.STORE_NOT_READY,
        )
    return pipeline


def get_retriever(request: Request) -> Retriever:
    """Resolve the retriever wired at startup."""
    retriever = getattr(request.app.state, "retriever", None)
    if retriever is None:
        raise RetrievalError(
            "Vector store not loaded",
            code=ErrorCode.STORE_NOT_READY,
        )
    return retriever


@router.post("/query", response_model=QueryResponse)
async def query_endpoint(
    request: QueryRequest,
    pipeline: RAGPipeline = Depends(get_pipeline),
) -> QueryResponse:
    """Answer a question from the indexed documents."""
    response = await pipeline.query(query_request_to_rag_query(request))
    return rag_response_to_query_response(response)


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(
    request: SearchRequest,
    retriever: Retriever = Depends(get_retriever),
) -> SearchResponse:
    """Return the chunks most similar to the query, without answering."""
    results = await asyncio.to_thread(retriever.retrieve, request.query, request.top_k)
    return SearchResponse(
        results=[
            SearchHit(
                id=r.document.id,
                filename=r.document.filename,
                content=r.document.content,
                metadata=r.document.metadata,
                score=r.score,
            )
            for r in results
        ]
    )


def rag_response_to_query_response(rag_response: RAGResponse) -> QueryResponse:
    """Convert internal RAGResponse to API QueryResponse."""
    return QueryResponse(
        answer=rag_response.answer,
        sources=[s.model_dump() for s in rag_response.sources],
        model=rag_response.model,
        generator=rag_response.generator.value,
    )


def query_request_to_rag_query(request: QueryRequest) -> RAGQuery:
    """Convert API QueryRequest to internal RAGQuery."""
    return RAGQuery(
        question=request.question,
        top_k=request.top_k,
        score_threshold=request.score_threshold,
    )
