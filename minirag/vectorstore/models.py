"""Vector store data models."""

from pydantic import BaseModel, Field

from minirag.documents.models import Document


class SearchResult(BaseModel):
    """Result from a vector similarity search.

    Attributes:
        document: The matched document.
        score: Cosine similarity to the query (higher is more similar).
    """

    document: Document = Field(description="Matched document")
    score: float = Field(description="Similarity score")


class StoreSnapshot(BaseModel):
    """Persisted form of the corpus.

    ``documents[i]`` is embedded as ``vectors[i]``; the two lists must have
    the same length.
    """

    documents: list[Document] = Field(
        default_factory=list,
        description="Stored documents",
    )
    vectors: list[list[float]] = Field(
        default_factory=list,
        description="Embedding vectors, index-aligned with documents",
    )
