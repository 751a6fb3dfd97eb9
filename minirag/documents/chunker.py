"""Sentence-aligned text chunking with overlap."""

from pydantic import BaseModel, Field

from minirag.documents.models import Document, DocumentChunk
from minirag.exceptions import ConfigurationError
from minirag.logging_config import get_logger
from minirag.textutils import sentence_spans

logger = get_logger(__name__)


class ChunkerConfig(BaseModel):
    """Configuration for text chunking.

    Attributes:
        chunk_size: Maximum chunk length in characters, counting one
            separator per sentence. A single sentence longer than this still
            becomes one (oversized) chunk.
        chunk_overlap: The sentence before a cut is repeated at the start of
            the next chunk only if it is shorter than this.
    """

    chunk_size: int = Field(default=500, description="Maximum chunk size")
    chunk_overlap: int = Field(default=50, description="Maximum length of a repeated sentence")


class SentenceChunker:
    """Chunk text by sentences, grouping them up to the size limit.

    Documents that already fit are returned as a single chunk. Longer ones
    are split with ``sentence_spans`` and sentences are packed greedily; when
    the next sentence would overflow the chunk, the chunk is closed and the
    new one is seeded with the previous chunk's last sentence when that
    sentence is short.
    """

    def __init__(self, config: ChunkerConfig | None = None) -> None:
        """Initialize chunker with configuration.

        Args:
            config: Chunking configuration. Uses defaults if not provided.

        Raises:
            ConfigurationError: If chunk size or overlap is not positive.
        """
        self.config = config or ChunkerConfig()

        if self.config.chunk_size <= 0:
            raise ConfigurationError(
                f"chunk_size must be positive, got {self.config.chunk_size}",
                details={"chunk_size": self.config.chunk_size},
            )
        if self.config.chunk_overlap <= 0:
            raise ConfigurationError(
                f"chunk_overlap must be positive, got {self.config.chunk_overlap}",
                details={"chunk_overlap": self.config.chunk_overlap},
            )

    def chunk(self, document: Document) -> list[DocumentChunk]:
        """Split a document into chunks.

        Args:
            document: The document to chunk.

        Returns:
            Chunks in document order, indexed from 0.
        """
        text = document.content
        if len(text) <= self.config.chunk_size:
            return [self._create_chunk(document, 0, 0, len(text))]

        spans = sentence_spans(text)
        if not spans:
            return []

        chunks: list[DocumentChunk] = []
        # Buffered sentences are always the contiguous range spans[first:i].
        first = 0
        # Each buffered sentence counts one extra code point for its separator.
        buffered = 0

        for i, (sentence_start, sentence_end) in enumerate(spans):
            length = sentence_end - sentence_start
            if buffered > 0 and buffered + length > self.config.chunk_size:
                chunks.append(
                    self._create_chunk(
                        document,
                        len(chunks),
                        spans[first][0],
                        spans[i - 1][1],
                    )
                )
                first = self._overlap_start(spans, i)
                buffered = sum(e - s + 1 for s, e in spans[first:i])
            buffered += length + 1

        chunks.append(
            self._create_chunk(document, len(chunks), spans[first][0], spans[-1][1])
        )

        logger.debug(
            f"Chunked document into {len(chunks)} chunks",
            extra={"document_id": document.id, "length": len(text)},
        )
        return chunks

    def _overlap_start(self, spans: list[tuple[int, int]], cut: int) -> int:
        """Index of the first sentence of the chunk that starts at ``cut``.

        Only the sentence right before the cut can be repeated, and only when
        it is shorter than ``chunk_overlap``. A long boundary sentence means
        no overlap at all.

        Args:
            spans: All sentence spans.
            cut: Sentence that triggered the cut.

        Returns:
            Sentence index to start the next buffer at.
        """
        sentence_start, sentence_end = spans[cut - 1]
        if sentence_end - sentence_start < self.config.chunk_overlap:
            return cut - 1
        return cut

    def _create_chunk(
        self,
        document: Document,
        index: int,
        start_pos: int,
        end_pos: int,
    ) -> DocumentChunk:
        """Create a chunk over ``document.content[start_pos:end_pos]``.

        Args:
            document: Parent document.
            index: Chunk index.
            start_pos: Start position.
            end_pos: End position.

        Returns:
            New DocumentChunk instance.
        """
        return DocumentChunk(
            id=f"{document.id}_chunk_{index}",
            content=document.content[start_pos:end_pos],
            filename=document.filename,
            metadata=dict(document.metadata),
            chunk_index=index,
            start_pos=start_pos,
            end_pos=end_pos,
        )
