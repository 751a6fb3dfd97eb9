"""Local document retrieval with hashed n-gram embeddings."""

__version__ = "0.1.0"
