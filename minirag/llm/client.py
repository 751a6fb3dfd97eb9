"""LLM client interface and the Ollama implementation."""

import time
from abc import ABC, abstractmethod

import httpx

from minirag.config import LLMSettings, get_settings
from minirag.exceptions import ErrorCode, LLMError
from minirag.llm.models import GenerationOptions, GenerationResult
from minirag.logging_config import get_logger
from minirag.observability.metrics import track_llm_request

logger = get_logger(__name__)


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Generate text from a prompt.

        Args:
            prompt: Complete prompt text.
            options: Sampling options. Defaults come from settings.

        Returns:
            GenerationResult with generated text.

        Raises:
            LLMError: If generation fails.
        """
        ...

    @abstractmethod
    async def check_health(self) -> None:
        """Check the service is reachable.

        Raises:
            LLMError: If the service is unavailable.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


class OllamaClient(LLMClient):
    """Client for the Ollama HTTP API (``/api/generate``, ``/api/tags``)."""

    def __init__(
        self,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama client.

        Args:
            settings: LLM configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().llm
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        return self._settings.model

    def default_options(self) -> GenerationOptions:
        """Sampling options built from settings."""
        return GenerationOptions(
            temperature=self._settings.temperature,
            top_p=self._settings.top_p,
            top_k=self._settings.top_k,
            num_predict=self._settings.max_tokens,
        )

    async def generate(
        self,
        prompt: str,
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        client = await self._get_client()
        url = f"{self._settings.base_url}/api/generate"
        payload = {
            "model": self._settings.model,
            "prompt": prompt,
            "stream": False,
            "options": (options or self.default_options()).model_dump(),
        }

        start_time = time.perf_counter()
        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            track_llm_request(self.model_name, time.perf_counter() - start_time, False)
            logger.error(f"LLM request timed out: {e}")
            raise LLMError(
                "LLM request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            track_llm_request(self.model_name, time.perf_counter() - start_time, False)
            status = e.response.status_code
            logger.error(f"LLM request failed: {status}")
            raise LLMError(
                f"LLM service returned {status}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"status_code": status},
            ) from e

        except httpx.RequestError as e:
            track_llm_request(self.model_name, time.perf_counter() - start_time, False)
            logger.error(f"LLM connection error: {e}")
            raise LLMError(
                f"Failed to connect to LLM service: {e}",
                code=ErrorCode.LLM_UNAVAILABLE,
                details={"url": url},
            ) from e

        try:
            data = response.json()
            result = GenerationResult(
                content=data["response"].strip(),
                model=data.get("model", self._settings.model),
                done_reason=data.get("done_reason"),
            )
        except (KeyError, TypeError, ValueError) as e:
            track_llm_request(self.model_name, time.perf_counter() - start_time, False)
            raise LLMError(
                f"Invalid response from LLM: {e}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        track_llm_request(self.model_name, time.perf_counter() - start_time)
        return result

    async def check_health(self) -> None:
        client = await self._get_client()
        url = f"{self._settings.base_url}/api/tags"

        try:
            response = await client.get(url)
        except httpx.RequestError as e:
            raise LLMError(
                f"Cannot reach Ollama service: {e}",
                code=ErrorCode.LLM_UNAVAILABLE,
                details={"url": url},
            ) from e

        if response.status_code != 200:
            raise LLMError(
                f"Ollama service returned status {response.status_code}",
                code=ErrorCode.LLM_UNAVAILABLE,
                details={"url": url, "status_code": response.status_code},
            )
