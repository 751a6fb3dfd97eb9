"""Embedder interface and the hashed n-gram implementation."""

from abc import ABC, abstractmethod

from minirag.exceptions import ConfigurationError, EmbeddingError, ErrorCode
from minirag.logging_config import get_logger
from minirag.textutils import normalize_text, normalize_vector

logger = get_logger(__name__)

FNV_OFFSET_BASIS_32 = 0x811C9DC5
FNV_PRIME_32 = 0x01000193


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a hash of ``data``."""
    h = FNV_OFFSET_BASIS_32
    for byte in data:
        h ^= byte
        h = (h * FNV_PRIME_32) & 0xFFFFFFFF
    return h


class Embedder(ABC):
    """Maps text to a fixed-length dense vector.

    Implementations must be deterministic: the same text always yields the
    same vector, and every vector has ``dimensions`` entries.
    """

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Generate the embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            Vector of length ``dimensions``.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in order, stopping at the first failure.

        Args:
            texts: Texts to embed.

        Returns:
            One vector per text.

        Raises:
            EmbeddingError: If any text fails to embed.
        """
        return [self.embed(text) for text in texts]


class HashingEmbedder(Embedder):
    """Feature-hashing vectorizer over character 1-, 2- and 3-grams.

    Text is lowercased and whitespace-collapsed, every n-gram is hashed with
    FNV-1a into one of ``dimensions`` buckets, and the bucket counts are
    L2-normalized. Hash collisions are accepted.
    """

    NGRAM_SIZES = (1, 2, 3)

    def __init__(self, dimensions: int) -> None:
        """Initialize the embedder.

        Args:
            dimensions: Vector length, must be positive.

        Raises:
            ConfigurationError: If ``dimensions`` is not positive.
        """
        if dimensions <= 0:
            raise ConfigurationError(
                f"Embedding dimension must be positive, got {dimensions}",
                details={"dimensions": dimensions},
            )
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        try:
            return self._embed(text)
        except Exception as e:
            logger.error(f"Embedding failed: {e}", extra={"text_length": len(text)})
            raise EmbeddingError(
                f"Failed to embed text: {e}",
                code=ErrorCode.EMBEDDING_ERROR,
                details={"text": text[:100], "error": str(e)},
            ) from e

    def _embed(self, text: str) -> list[float]:
        cleaned = normalize_text(text.lower())
        vector = [0.0] * self._dimensions
        length = len(cleaned)

        for i in range(length):
            for n in self.NGRAM_SIZES:
                if i + n > length:
                    break
                ngram = cleaned[i : i + n]
                bucket = fnv1a_32(ngram.encode("utf-8")) % self._dimensions
                vector[bucket] += 1.0

        normalize_vector(vector)
        return vector
