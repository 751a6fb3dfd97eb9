"""RAG pipeline orchestrator."""

import asyncio

from minirag.config import LLMMode
from minirag.exceptions import LLMError
from minirag.llm.client import LLMClient
from minirag.llm.prompts import select_prompt_template
from minirag.logging_config import get_logger
from minirag.observability.metrics import track_answer
from minirag.rag.fallback import NO_RESULTS_ANSWER, generate_fallback_answer
from minirag.rag.models import (
    AnswerGenerator,
    RAGQuery,
    RAGResponse,
    SourceAttribution,
)
from minirag.retrieval.retriever import Retriever
from minirag.textutils import truncate_text
from minirag.vectorstore.models import SearchResult

logger = get_logger(__name__)

SOURCE_PREVIEW_LENGTH = 100


class RAGPipeline:
    """Retrieves chunks for a question and turns them into an answer.

    In ``local`` mode the LLM is tried first; a failed health check or a
    failed generation falls back to the rule-based answer.
    """

    def __init__(
        self,
        retriever: Retriever,
        llm_client: LLMClient | None = None,
        mode: LLMMode = LLMMode.LOCAL,
    ) -> None:
        """Initialize the RAG pipeline.

        Args:
            retriever: Chunk retriever.
            llm_client: LLM client, required for local mode.
            mode: Answer generation mode.
        """
        self._retriever = retriever
        self._llm_client = llm_client
        self._mode = mode

    async def query(self, request: RAGQuery) -> RAGResponse:
        """Execute a RAG query.

        Args:
            request: The RAG query request.

        Returns:
            RAGResponse with answer and sources.
        """
        logger.info(
            "Processing RAG query",
            extra={"question_length": len(request.question), "top_k": request.top_k},
        )

        # Search is CPU-bound; keep it off the event loop
        results = await asyncio.to_thread(
            self._retriever.retrieve,
            request.question,
            request.top_k,
        )
        filtered = [r for r in results if r.score >= request.score_threshold]

        logger.debug(
            f"Retrieved {len(filtered)} chunks",
            extra={"total_retrieved": len(results), "after_threshold": len(filtered)},
        )

        if not filtered:
            return RAGResponse(
                answer=NO_RESULTS_ANSWER,
                sources=[],
                generator=AnswerGenerator.FALLBACK,
            )

        answer, model = await self._generate(request.question, filtered)
        generator = AnswerGenerator.LLM if model else AnswerGenerator.FALLBACK
        track_answer(generator.value)

        return RAGResponse(
            answer=answer,
            sources=[self._attribution(r) for r in filtered],
            model=model,
            generator=generator,
        )

    async def _generate(
        self,
        question: str,
        results: list[SearchResult],
    ) -> tuple[str, str | None]:
        """Answer with the LLM when possible.

        Returns:
            The answer and the model name, or None when the fallback answered.
        """
        if self._mode != LLMMode.LOCAL or self._llm_client is None:
            return generate_fallback_answer(question, results), None

        try:
            await self._llm_client.check_health()
            template = select_prompt_template(question)
            prompt = template.build_prompt(question, [r.document for r in results])
            generation = await self._llm_client.generate(prompt)
        except LLMError as e:
            logger.warning(
                f"LLM unavailable, using rule-based answer: {e.message}",
                extra={"error_code": e.code.value},
            )
            return generate_fallback_answer(question, results), None

        if not generation.content:
            return generate_fallback_answer(question, results), None
        return generation.content, generation.model

    @staticmethod
    def _attribution(result: SearchResult) -> SourceAttribution:
        return SourceAttribution(
            document_id=result.document.id,
            filename=result.document.filename,
            content=truncate_text(result.document.content, SOURCE_PREVIEW_LENGTH),
            score=result.score,
        )
