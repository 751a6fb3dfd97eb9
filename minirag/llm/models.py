"""LLM data models."""

from pydantic import BaseModel, Field


class GenerationOptions(BaseModel):
    """Sampling options sent with an Ollama generate request.

    Attributes:
        temperature: Sampling temperature.
        top_p: Nucleus sampling cutoff.
        top_k: Top-k sampling cutoff.
        num_predict: Maximum tokens to generate.
    """

    temperature: float = Field(default=0.7, description="Sampling temperature")
    top_p: float = Field(default=0.9, description="Nucleus sampling cutoff")
    top_k: int = Field(default=40, description="Top-k sampling cutoff")
    num_predict: int = Field(default=1024, description="Maximum tokens to generate")


class GenerationResult(BaseModel):
    """Result from LLM generation.

    Attributes:
        content: The generated text.
        model: Model used for generation.
        done_reason: Why generation stopped, when the server reports it.
    """

    content: str = Field(description="Generated text")
    model: str = Field(description="Model used")
    done_reason: str | None = Field(default=None, description="Stop reason")
