"""RAG pipeline data models."""

from enum import Enum

from pydantic import BaseModel, Field


class AnswerGenerator(str, Enum):
    """Which stage produced an answer."""

    LLM = "llm"
    FALLBACK = "fallback"


class SourceAttribution(BaseModel):
    """Attribution to a retrieved chunk.

    Attributes:
        document_id: Chunk identifier.
        filename: Source file name.
        content: Relevant content snippet.
        score: Relevance score.
    """

    document_id: str = Field(description="Chunk identifier")
    filename: str = Field(description="Source file name")
    content: str = Field(description="Relevant content snippet")
    score: float = Field(description="Relevance score")


class RAGQuery(BaseModel):
    """Input for RAG query.

    Attributes:
        question: The user's question.
        top_k: Number of chunks to retrieve.
        score_threshold: Minimum relevance score.
    """

    question: str = Field(description="User question")
    top_k: int = Field(default=3, ge=1, le=20, description="Chunks to retrieve")
    score_threshold: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Minimum relevance score",
    )


class RAGResponse(BaseModel):
    """Response from RAG query.

    Attributes:
        answer: Generated answer.
        sources: Source attributions.
        model: LLM model used, or None for rule-based answers.
        generator: Whether the LLM or the fallback produced the answer.
    """

    answer: str = Field(description="Generated answer")
    sources: list[SourceAttribution] = Field(
        default_factory=list,
        description="Source attributions",
    )
    model: str | None = Field(default=None, description="LLM model used")
    generator: AnswerGenerator = Field(description="Answer generator")
