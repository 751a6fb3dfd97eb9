"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from minirag.api.app import app
from minirag.config import LLMMode
from minirag.documents.chunker import ChunkerConfig, SentenceChunker
from minirag.embeddings.service import HashingEmbedder
from minirag.rag.pipeline import RAGPipeline
from minirag.retrieval.retriever import Retriever
from minirag.vectorstore.service import InMemoryVectorStore


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def embedder() -> HashingEmbedder:
    """Hashing embedder with the default dimension."""
    return HashingEmbedder(300)


@pytest.fixture
def store(embedder: HashingEmbedder) -> InMemoryVectorStore:
    """Empty in-memory vector store."""
    return InMemoryVectorStore(embedder)


@pytest.fixture
def retriever(store: InMemoryVectorStore) -> Retriever:
    """Retriever over an empty store with 500/50 chunking."""
    return Retriever(store, SentenceChunker(ChunkerConfig(chunk_size=500, chunk_overlap=50)))


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Directory holding one refund policy document."""
    directory = tmp_path / "docs"
    directory.mkdir()
    (directory / "policy.txt").write_text(
        "退款需要在7天内申请。退款审核需要3个工作日。",
        encoding="utf-8",
    )
    return directory


@pytest.fixture
def loaded_retriever(retriever: Retriever, docs_dir: Path, tmp_path: Path) -> Retriever:
    """Retriever with the policy document indexed."""
    retriever.build_from_directory(docs_dir, tmp_path / "store.json")
    return retriever


@pytest.fixture
def wired_app(loaded_retriever: Retriever) -> Generator[FastAPI, None, None]:
    """Application with state wired the way the lifespan does it.

    ASGITransport does not run the lifespan, so the state is set here and
    removed afterwards.
    """
    app.state.retriever = loaded_retriever
    app.state.pipeline = RAGPipeline(loaded_retriever, None, mode=LLMMode.FALLBACK)
    yield app
    del app.state.retriever
    del app.state.pipeline
