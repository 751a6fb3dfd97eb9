"""Vector store interface and the in-memory implementation."""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from minirag.documents.models import Document
from minirag.embeddings.service import Embedder
from minirag.exceptions import (
    ConsistencyError,
    EmbeddingError,
    ErrorCode,
    SerializationError,
    StoreIOError,
)
from minirag.logging_config import get_logger
from minirag.observability.metrics import (
    set_vectorstore_size,
    track_vectorstore_operation,
)
from minirag.textutils import cosine_similarity
from minirag.vectorstore.locks import ReadWriteLock
from minirag.vectorstore.models import SearchResult, StoreSnapshot

logger = get_logger(__name__)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Defines the interface for storing, searching and persisting documents.
    """

    @abstractmethod
    def add_document(self, document: Document) -> None:
        """Embed a document and append it to the corpus.

        Args:
            document: Document to store.

        Raises:
            EmbeddingError: If the document cannot be embedded.
        """
        ...

    @abstractmethod
    def add_documents(self, documents: list[Document]) -> None:
        """Add documents in order, stopping at the first failure.

        Documents added before the failure stay in the store.

        Args:
            documents: Documents to store.

        Raises:
            EmbeddingError: If a document cannot be embedded.
        """
        ...

    @abstractmethod
    def search(self, query: str, top_k: int) -> list[SearchResult]:
        """Search for the documents most similar to ``query``.

        Args:
            query: Query text.
            top_k: Maximum results to return.

        Returns:
            Results sorted by descending score.

        Raises:
            EmbeddingError: If the query cannot be embedded.
        """
        ...

    @abstractmethod
    def save(self, path: str | Path) -> None:
        """Persist the corpus.

        Args:
            path: Destination file.

        Raises:
            StoreIOError: If the file cannot be written.
            SerializationError: If the corpus cannot be encoded.
        """
        ...

    @abstractmethod
    def load(self, path: str | Path) -> None:
        """Replace the corpus with a persisted one.

        Args:
            path: Source file.

        Raises:
            StoreIOError: If the file cannot be read.
            SerializationError: If the file is malformed.
            ConsistencyError: If documents and vectors do not line up.
        """
        ...

    @abstractmethod
    def document_count(self) -> int:
        """Get the number of stored documents."""
        ...


class InMemoryVectorStore(VectorStore):
    """Append-only corpus searched by exhaustive cosine similarity.

    Documents and vectors live in two parallel lists joined by position.
    Searches share a reader/writer lock; insertion and loading hold it
    exclusively.
    """

    def __init__(self, embedder: Embedder) -> None:
        """Initialize an empty store.

        Args:
            embedder: Embedder used for documents and queries.
        """
        self._embedder = embedder
        self._documents: list[Document] = []
        self._vectors: list[list[float]] = []
        self._lock = ReadWriteLock()

    @property
    def embedder(self) -> Embedder:
        return self._embedder

    def _embed(self, text: str) -> list[float]:
        try:
            return self._embedder.embed(text)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(
                f"Embedder failed: {e}",
                code=ErrorCode.EMBEDDING_ERROR,
                details={"error": str(e)},
            ) from e

    def add_document(self, document: Document) -> None:
        with track_vectorstore_operation("add"):
            vector = self._embed(document.content)
            with self._lock.write_locked():
                self._documents.append(document)
                self._vectors.append(vector)
                count = len(self._documents)
        set_vectorstore_size(count)

    def add_documents(self, documents: list[Document]) -> None:
        for position, document in enumerate(documents):
            try:
                self.add_document(document)
            except EmbeddingError as e:
                logger.error(
                    f"Stopping batch at document {document.id}: {e.message}",
                    extra={"position": position, "added": position},
                )
                raise EmbeddingError(
                    f"Failed to add document {document.id} "
                    f"(position {position}): {e.message}",
                    code=e.code,
                    details={
                        **e.details,
                        "document_id": document.id,
                        "position": position,
                    },
                ) from e

    def search(self, query: str, top_k: int) -> list[SearchResult]:
        with track_vectorstore_operation("search"), self._lock.read_locked():
            if not self._documents or top_k <= 0:
                return []

            query_vector = self._embed(query)
            scored = [
                SearchResult(
                    document=document,
                    score=cosine_similarity(query_vector, vector),
                )
                for document, vector in zip(self._documents, self._vectors)
            ]

        # sorted() is stable: equal scores keep insertion order
        scored = sorted(scored, key=lambda r: r.score, reverse=True)
        return scored[:top_k]

    def save(self, path: str | Path) -> None:
        target = Path(path)

        with track_vectorstore_operation("save"):
            with self._lock.read_locked():
                snapshot = StoreSnapshot(
                    documents=list(self._documents),
                    vectors=[list(v) for v in self._vectors],
                )

            try:
                payload = snapshot.model_dump_json(indent=1)
            except (PydanticSerializationError, ValueError) as e:
                raise SerializationError(
                    f"Failed to serialize vector store: {e}",
                    details={"path": str(target), "error": str(e)},
                ) from e

            self._write_atomic(target, payload)

        logger.info(
            f"Saved {len(snapshot.documents)} documents to {target}",
            extra={"path": str(target)},
        )

    def _write_atomic(self, target: Path, payload: str) -> None:
        """Write via a temp file in the same directory, then rename over ``target``."""
        tmp_name: str | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreIOError(
                f"Failed to write vector store: {e}",
                details={"path": str(target), "error": str(e)},
            ) from e

    def load(self, path: str | Path) -> None:
        source = Path(path)

        with track_vectorstore_operation("load"):
            try:
                raw = source.read_bytes()
            except OSError as e:
                raise StoreIOError(
                    f"Failed to read vector store: {e}",
                    details={"path": str(source), "error": str(e)},
                ) from e

            try:
                snapshot = StoreSnapshot.model_validate_json(raw)
            except PydanticValidationError as e:
                raise SerializationError(
                    f"Malformed vector store file: {source}",
                    details={"path": str(source), "errors": e.error_count()},
                ) from e

            self._check_consistency(snapshot, source)

            with self._lock.write_locked():
                self._documents = snapshot.documents
                self._vectors = snapshot.vectors
                count = len(self._documents)

        set_vectorstore_size(count)
        logger.info(
            f"Loaded {count} documents from {source}",
            extra={"path": str(source)},
        )

    def _check_consistency(self, snapshot: StoreSnapshot, source: Path) -> None:
        if len(snapshot.documents) != len(snapshot.vectors):
            raise ConsistencyError(
                "Document and vector counts differ: "
                f"{len(snapshot.documents)} documents, {len(snapshot.vectors)} vectors",
                details={
                    "path": str(source),
                    "documents": len(snapshot.documents),
                    "vectors": len(snapshot.vectors),
                },
            )

        expected = self._embedder.dimensions
        for position, vector in enumerate(snapshot.vectors):
            if len(vector) != expected:
                raise ConsistencyError(
                    f"Vector {position} has dimension {len(vector)}, expected {expected}",
                    details={
                        "path": str(source),
                        "position": position,
                        "dimension": len(vector),
                        "expected": expected,
                    },
                )

    def document_count(self) -> int:
        with self._lock.read_locked():
            return len(self._documents)
