"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env file).
Core components never read settings themselves: the CLI and API pass these
values into constructors explicitly.
"""

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LLMMode(str, Enum):
    """How answers are generated from retrieved chunks."""

    LOCAL = "local"
    FALLBACK = "fallback"


class LLMSettings(BaseSettings):
    """Ollama generation configuration.

    Variables use the ``LLM_`` prefix. Model, base URL and token limit also
    accept the ``OLLAMA_MODEL``, ``OLLAMA_BASE_URL`` and ``MAX_TOKENS`` names.
    """

    model_config = SettingsConfigDict(env_prefix="LLM_", populate_by_name=True)

    mode: LLMMode = Field(
        default=LLMMode.LOCAL,
        description="local = Ollama with rule-based fallback, fallback = rules only",
    )
    base_url: str = Field(
        default="http://localhost:11434",
        validation_alias=AliasChoices("LLM_BASE_URL", "OLLAMA_BASE_URL"),
        description="Ollama server base URL",
    )
    model: str = Field(
        default="qwen2.5:7b",
        validation_alias=AliasChoices("LLM_MODEL", "OLLAMA_MODEL"),
        description="Model name to use for generation",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        default=1024,
        validation_alias=AliasChoices("LLM_MAX_TOKENS", "MAX_TOKENS"),
        description="Maximum tokens to predict (num_predict)",
    )
    temperature: float = Field(
        default=0.7,
        description="Sampling temperature",
    )
    top_p: float = Field(default=0.9, description="Nucleus sampling cutoff")
    top_k: int = Field(default=40, description="Top-k sampling cutoff")


class RetrievalSettings(BaseSettings):
    """Corpus building and retrieval configuration."""

    model_config = SettingsConfigDict(env_prefix="")

    docs_path: str = Field(
        default="docs",
        description="Directory of .txt documents to index",
    )
    vector_store_path: str = Field(
        default="data/vector_store.json",
        description="Persisted vector store file",
    )
    chunk_size: int = Field(
        default=500,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=50,
        description="Maximum length of a sentence repeated across chunks",
    )
    top_k: int = Field(default=3, description="Number of chunks to retrieve")
    similarity_threshold: float = Field(
        default=0.0,
        description="Minimum score for a chunk to be used in an answer",
    )
    embedding_dimension: int = Field(
        default=300,
        description="Hashing embedder dimension",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
