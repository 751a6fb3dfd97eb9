"""Tests for application configuration."""

import os
from unittest.mock import patch

import pytest

from minirag.bootstrap import create_retriever
from minirag.config import (
    Environment,
    LLMMode,
    LLMSettings,
    RetrievalSettings,
    Settings,
    get_settings,
)
from minirag.exceptions import ConfigurationError


class TestLLMSettings:
    """Tests for LLM configuration."""

    def test_default_values(self) -> None:
        """Default values point to local Ollama."""
        settings = LLMSettings()
        assert settings.mode == LLMMode.LOCAL
        assert settings.base_url == "http://localhost:11434"
        assert settings.model == "qwen2.5:7b"
        assert settings.max_tokens == 1024
        assert settings.temperature == 0.7
        assert settings.top_p == 0.9
        assert settings.top_k == 40

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"LLM_MODEL": "llama3:8b", "LLM_MODE": "fallback"}):
            settings = LLMSettings()
            assert settings.model == "llama3:8b"
            assert settings.mode == LLMMode.FALLBACK

    def test_ollama_env_names(self) -> None:
        """OLLAMA_MODEL, OLLAMA_BASE_URL and MAX_TOKENS are honoured."""
        env = {
            "OLLAMA_MODEL": "llama3:8b",
            "OLLAMA_BASE_URL": "http://ollama:11434",
            "MAX_TOKENS": "256",
            "LLM_TEMPERATURE": "0.2",
        }
        with patch.dict(os.environ, env):
            settings = LLMSettings()
            assert settings.model == "llama3:8b"
            assert settings.base_url == "http://ollama:11434"
            assert settings.max_tokens == 256
            assert settings.temperature == 0.2

    def test_prefixed_name_wins(self) -> None:
        """The LLM_ name takes precedence over the Ollama one."""
        env = {"LLM_MODEL": "mistral:7b", "OLLAMA_MODEL": "llama3:8b"}
        with patch.dict(os.environ, env):
            assert LLMSettings().model == "mistral:7b"

    def test_field_names_accepted(self) -> None:
        """Settings can still be built from field names."""
        settings = LLMSettings(model="llama3:8b", base_url="http://x:1", max_tokens=64)
        assert settings.model == "llama3:8b"
        assert settings.base_url == "http://x:1"
        assert settings.max_tokens == 64


class TestRetrievalSettings:
    """Tests for retrieval configuration."""

    def test_default_values(self) -> None:
        """Defaults match the documented corpus layout."""
        settings = RetrievalSettings()
        assert settings.docs_path == "docs"
        assert settings.vector_store_path == "data/vector_store.json"
        assert settings.chunk_size == 500
        assert settings.chunk_overlap == 50
        assert settings.top_k == 3
        assert settings.similarity_threshold == 0.0
        assert settings.embedding_dimension == 300

    def test_env_override(self) -> None:
        """Unprefixed environment variables override defaults."""
        env = {"CHUNK_SIZE": "200", "VECTOR_STORE_PATH": "/tmp/store.json"}
        with patch.dict(os.environ, env):
            settings = RetrievalSettings()
            assert settings.chunk_size == 200
            assert settings.vector_store_path == "/tmp/store.json"

    def test_invalid_values_fail_at_construction(self) -> None:
        """Bad sizes are rejected when components are built."""
        with pytest.raises(ConfigurationError):
            create_retriever(RetrievalSettings(chunk_overlap=0))
        with pytest.raises(ConfigurationError):
            create_retriever(RetrievalSettings(embedding_dimension=0))


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_default_api_settings(self) -> None:
        """Default API host and port."""
        settings = Settings()
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 8000

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.llm, LLMSettings)
        assert isinstance(settings.retrieval, RetrievalSettings)

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.environment == Environment.PRODUCTION


class TestGetSettings:
    """Tests for settings singleton."""

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
