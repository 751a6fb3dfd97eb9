"""Tests for LLM module."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from minirag.config import LLMSettings
from minirag.documents.models import Document
from minirag.exceptions import ErrorCode, LLMError
from minirag.llm.client import OllamaClient
from minirag.llm.models import GenerationOptions, GenerationResult
from minirag.llm.prompts import (
    RAGPromptTemplate,
    RefundPromptTemplate,
    select_prompt_template,
)


def _mock_response(payload: object, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


class TestGenerationModels:
    """Tests for generation models."""

    def test_default_options(self) -> None:
        """Options default to the documented sampling values."""
        options = GenerationOptions()
        assert options.model_dump() == {
            "temperature": 0.7,
            "top_p": 0.9,
            "top_k": 40,
            "num_predict": 1024,
        }

    def test_create_result(self) -> None:
        """Result can be created."""
        result = GenerationResult(content="Generated text", model="qwen2.5:7b")
        assert result.content == "Generated text"
        assert result.done_reason is None


class TestOllamaClient:
    """Tests for OllamaClient."""

    def test_model_name(self) -> None:
        """Client returns configured model name."""
        client = OllamaClient(settings=LLMSettings(model="llama3:8b"))
        assert client.model_name == "llama3:8b"

    def test_default_options_from_settings(self) -> None:
        """Sampling options come from settings."""
        settings = LLMSettings(temperature=0.2, top_p=0.5, top_k=10, max_tokens=64)
        options = OllamaClient(settings=settings).default_options()
        assert options == GenerationOptions(
            temperature=0.2, top_p=0.5, top_k=10, num_predict=64
        )

    async def test_generate(self) -> None:
        """Client posts a non-streaming request and strips the answer."""
        settings = LLMSettings(base_url="http://test:11434", model="test-model")
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.return_value = _mock_response(
            {"model": "test-model", "response": "  退款需要7天内申请。 \n", "done_reason": "stop"}
        )

        client = OllamaClient(settings=settings, client=mock_client)
        result = await client.generate("问题")

        assert result.content == "退款需要7天内申请。"
        assert result.model == "test-model"
        assert result.done_reason == "stop"

        call = mock_client.post.call_args
        assert call.args[0] == "http://test:11434/api/generate"
        payload = call.kwargs["json"]
        assert payload["model"] == "test-model"
        assert payload["prompt"] == "问题"
        assert payload["stream"] is False
        assert payload["options"]["num_predict"] == settings.max_tokens

    async def test_generate_custom_options(self) -> None:
        """Explicit options override the defaults."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.return_value = _mock_response({"response": "ok"})

        client = OllamaClient(settings=LLMSettings(), client=mock_client)
        await client.generate("hi", GenerationOptions(temperature=0.0, num_predict=8))

        options = mock_client.post.call_args.kwargs["json"]["options"]
        assert options["temperature"] == 0.0
        assert options["num_predict"] == 8

    async def test_timeout_error(self) -> None:
        """Timeout raises LLMError with correct code."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.side_effect = httpx.TimeoutException("Timeout")

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError) as exc_info:
            await client.generate("Hello")

        assert exc_info.value.code == ErrorCode.LLM_TIMEOUT

    async def test_http_status_error(self) -> None:
        """Non-2xx responses raise LLMError with the status code."""
        response = _mock_response({}, status_code=500)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Server error",
            request=MagicMock(),
            response=response,
        )
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.return_value = response

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError) as exc_info:
            await client.generate("Hello")

        assert exc_info.value.code == ErrorCode.LLM_SERVICE_ERROR
        assert exc_info.value.details["status_code"] == 500

    async def test_connection_error(self) -> None:
        """Connection error raises LLMError."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.side_effect = httpx.RequestError("Connection failed")

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError) as exc_info:
            await client.generate("Hello")

        assert exc_info.value.code == ErrorCode.LLM_UNAVAILABLE

    async def test_malformed_response(self) -> None:
        """A body without a response field raises LLMError."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.return_value = _mock_response({"error": "model not found"})

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError) as exc_info:
            await client.generate("Hello")

        assert exc_info.value.code == ErrorCode.LLM_SERVICE_ERROR

    async def test_invalid_json(self) -> None:
        """A body that is not JSON raises LLMError."""
        response = _mock_response(None)
        response.json.side_effect = ValueError("not json")
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.post.return_value = response

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError):
            await client.generate("Hello")

    async def test_check_health_ok(self) -> None:
        """A 200 from /api/tags means healthy."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.get.return_value = _mock_response({"models": []})

        client = OllamaClient(
            settings=LLMSettings(base_url="http://test:11434"), client=mock_client
        )
        await client.check_health()

        mock_client.get.assert_called_once_with("http://test:11434/api/tags")

    async def test_check_health_bad_status(self) -> None:
        """A non-200 status means unavailable."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.get.return_value = _mock_response({}, status_code=503)

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError) as exc_info:
            await client.check_health()

        assert exc_info.value.code == ErrorCode.LLM_UNAVAILABLE

    async def test_check_health_unreachable(self) -> None:
        """Connection failures mean unavailable."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)
        mock_client.get.side_effect = httpx.ConnectError("refused")

        client = OllamaClient(settings=LLMSettings(), client=mock_client)

        with pytest.raises(LLMError) as exc_info:
            await client.check_health()

        assert exc_info.value.code == ErrorCode.LLM_UNAVAILABLE

    async def test_close(self) -> None:
        """Client closes an owned HTTP client."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)

        client = OllamaClient(settings=LLMSettings(), client=mock_client)
        client._owns_client = True

        await client.close()

        mock_client.aclose.assert_called_once()

    async def test_close_injected_client(self) -> None:
        """An injected client is left open for its owner."""
        mock_client = AsyncMock(spec=httpx.AsyncClient)

        client = OllamaClient(settings=LLMSettings(), client=mock_client)
        await client.close()

        mock_client.aclose.assert_not_called()


class TestPromptTemplates:
    """Tests for prompt templates."""

    def _documents(self) -> list[Document]:
        return [
            Document(id="a", content="退款需要在7天内申请。", filename="policy.txt"),
            Document(id="b", content="客服电话：400-123-4567", filename="contact.txt"),
        ]

    def test_rag_prompt_contains_sources(self) -> None:
        """General prompt lists every source with its file name."""
        prompt = RAGPromptTemplate().build_prompt("营业时间？", self._documents())

        assert prompt.startswith(RAGPromptTemplate.DEFAULT_INSTRUCTIONS)
        assert "【来源1:policy.txt】\n退款需要在7天内申请。" in prompt
        assert "【来源2:contact.txt】" in prompt
        assert "问题：营业时间？" in prompt
        assert prompt.endswith("回答：")

    def test_rag_prompt_custom_sections(self) -> None:
        """Custom instructions and question section are used."""
        template = RAGPromptTemplate(
            instructions="Answer briefly.\n",
            question_template="Q: {question}\nA:",
        )
        prompt = template.build_prompt("Why?", [])

        assert prompt == "Answer briefly.\n相关文档内容：\nQ: Why?\nA:"

    def test_refund_prompt(self) -> None:
        """Refund prompt numbers documents and lists the requirements."""
        prompt = RefundPromptTemplate().build_prompt("退款流程是什么？", self._documents())

        assert prompt.startswith(RefundPromptTemplate.INSTRUCTIONS)
        assert "===== 文档 1 ======\n退款需要在7天内申请。" in prompt
        assert "用户问题：退款流程是什么？" in prompt
        assert RefundPromptTemplate.REQUIREMENTS in prompt

    @pytest.mark.parametrize(
        ("question", "expected"),
        [
            ("退款流程是什么？", RefundPromptTemplate),
            ("怎么退货", RefundPromptTemplate),
            ("营业时间是几点？", RAGPromptTemplate),
        ],
    )
    def test_select_prompt_template(self, question: str, expected: type) -> None:
        """Refund questions get the refund template."""
        assert isinstance(select_prompt_template(question), expected)
