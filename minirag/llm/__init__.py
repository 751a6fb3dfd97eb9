"""LLM client module."""

from minirag.llm.client import LLMClient, OllamaClient
from minirag.llm.models import GenerationOptions, GenerationResult
from minirag.llm.prompts import (
    PromptTemplate,
    RAGPromptTemplate,
    RefundPromptTemplate,
    select_prompt_template,
)

__all__ = [
    "GenerationOptions",
    "GenerationResult",
    "LLMClient",
    "OllamaClient",
    "PromptTemplate",
    "RAGPromptTemplate",
    "RefundPromptTemplate",
    "select_prompt_template",
]
