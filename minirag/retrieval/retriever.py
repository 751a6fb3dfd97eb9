"""Retrieval facade: builds the corpus from a directory and answers queries."""

from pathlib import Path

from minirag.documents.chunker import SentenceChunker
from minirag.documents.loader import TextFileLoader
from minirag.exceptions import EmbeddingError
from minirag.logging_config import get_logger
from minirag.observability.metrics import track_retrieval_request
from minirag.vectorstore.models import SearchResult
from minirag.vectorstore.service import VectorStore

logger = get_logger(__name__)


class Retriever:
    """Orchestrates loading, chunking and the vector store.

    Build time: files -> chunks -> vectors -> store file.
    Query time: query -> ranked chunks.
    """

    def __init__(
        self,
        vector_store: VectorStore,
        chunker: SentenceChunker,
        loader: TextFileLoader | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            vector_store: Store that receives chunks and answers searches.
            chunker: Splits source documents into chunks.
            loader: Reads source files. Defaults to a UTF-8 text loader.
        """
        self._vector_store = vector_store
        self._chunker = chunker
        self._loader = loader or TextFileLoader()

    @property
    def vector_store(self) -> VectorStore:
        return self._vector_store

    def build_from_directory(
        self,
        docs_path: str | Path,
        store_path: str | Path,
    ) -> int:
        """Index every text file in ``docs_path`` and persist the store.

        Does nothing when ``store_path`` already exists; remove the file to
        force a rebuild. Chunks that fail to embed are logged and skipped.

        Args:
            docs_path: Directory of ``.txt`` files.
            store_path: Where to save the store.

        Returns:
            Number of chunks added (0 when the store already existed).

        Raises:
            DocumentError: If the directory cannot be read.
            StoreIOError: If the store cannot be saved.
            SerializationError: If the store cannot be encoded.
        """
        store_file = Path(store_path)
        if store_file.exists():
            logger.info(
                "Vector store already exists, skipping build",
                extra={"path": str(store_file)},
            )
            return 0

        logger.info("Building vector store", extra={"docs_path": str(docs_path)})
        documents = self._loader.load_directory(docs_path)

        total_chunks = 0
        for document in documents:
            for chunk in self._chunker.chunk(document):
                try:
                    self._vector_store.add_document(chunk.to_document())
                except EmbeddingError as e:
                    logger.warning(
                        f"Skipping chunk {chunk.id}: {e.message}",
                        extra={"chunk_id": chunk.id},
                    )
                    continue
                total_chunks += 1

        self._vector_store.save(store_file)
        logger.info(
            f"Indexed {total_chunks} chunks from {len(documents)} documents",
            extra={"path": str(store_file)},
        )
        return total_chunks

    def load_or_build(
        self,
        docs_path: str | Path,
        store_path: str | Path,
    ) -> None:
        """Load the persisted store if present, otherwise build it.

        Args:
            docs_path: Directory of ``.txt`` files.
            store_path: Persisted store file.
        """
        if Path(store_path).exists():
            self._vector_store.load(store_path)
        else:
            self.build_from_directory(docs_path, store_path)

    def retrieve(self, query: str, top_k: int) -> list[SearchResult]:
        """Return the ``top_k`` chunks most similar to ``query``.

        Args:
            query: Query text.
            top_k: Maximum number of results.

        Returns:
            Results sorted by descending score.
        """
        results = self._vector_store.search(query, top_k)

        track_retrieval_request(
            chunks_returned=len(results),
            top_score=results[0].score if results else 0.0,
        )
        logger.debug(
            f"Retrieved {len(results)} results for query",
            extra={"query_length": len(query), "top_k": top_k},
        )
        return results
