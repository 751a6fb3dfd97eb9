"""Document data models."""

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A document with content and metadata.

    Documents are immutable; chunking derives new documents from a parent.

    Attributes:
        id: Unique identifier.
        content: The text content of the document.
        filename: Name of the source file.
        metadata: Ordered string metadata (filename, path, type, ...).
        embedding: Unused in the corpus file, vectors are stored separately.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique document identifier")
    content: str = Field(description="Text content of the document")
    filename: str = Field(default="", description="Source file name")
    metadata: dict[str, str] = Field(
        default_factory=dict,
        description="String metadata fields",
    )
    embedding: list[float] = Field(
        default_factory=list,
        description="Optional precomputed embedding",
    )


class DocumentChunk(Document):
    """A contiguous, sentence-aligned piece of a parent document.

    Attributes:
        chunk_index: Position of this chunk in the parent's chunk sequence.
        start_pos: Start offset in the parent content (code points).
        end_pos: End offset in the parent content (code points, exclusive).
    """

    chunk_index: int = Field(description="Chunk index in sequence")
    start_pos: int = Field(description="Start position in parent document")
    end_pos: int = Field(description="End position in parent document")

    def to_document(self) -> Document:
        """Plain document view of this chunk, as stored in the vector store."""
        return Document(
            id=self.id,
            content=self.content,
            filename=self.filename,
            metadata=dict(self.metadata),
        )
