"""Command-line interface.

Usage:
    minirag docs "退款流程是怎样的？"
    minirag build --force

Configuration comes from environment variables (see ``minirag.config``).
"""

import argparse
import asyncio
import sys
from pathlib import Path

from minirag.bootstrap import create_retriever
from minirag.config import Settings, get_settings
from minirag.exceptions import MiniRAGError
from minirag.llm.client import OllamaClient
from minirag.logging_config import get_logger, setup_logging
from minirag.rag.models import RAGQuery, RAGResponse
from minirag.rag.pipeline import RAGPipeline

logger = get_logger(__name__)

RULE = "=" * 50


def print_response(question: str, response: RAGResponse) -> None:
    """Print an answer followed by its sources."""
    print(f"\n问题: {question}")
    print(RULE)
    print("回答:")
    print("-" * 50)
    print(response.answer)
    print("-" * 50)

    if response.sources:
        print("\n参考来源:")
        for i, source in enumerate(response.sources, start=1):
            print(f"{i}. [{source.filename}] (相似度: {source.score:.2f})")
            print(f"   {source.content}")
    print(RULE)


async def ask(settings: Settings, question: str) -> RAGResponse:
    """Load or build the store, then answer ``question``."""
    retrieval = settings.retrieval
    retriever = create_retriever(retrieval)
    retriever.load_or_build(retrieval.docs_path, retrieval.vector_store_path)
    logger.info(
        f"Vector store ready with {retriever.vector_store.document_count()} chunks",
        extra={"path": retrieval.vector_store_path},
    )

    llm_client = OllamaClient(settings.llm)
    try:
        pipeline = RAGPipeline(retriever, llm_client, mode=settings.llm.mode)
        return await pipeline.query(
            RAGQuery(
                question=question,
                top_k=retrieval.top_k,
                score_threshold=retrieval.similarity_threshold,
            )
        )
    finally:
        await llm_client.close()


def build(settings: Settings, force: bool) -> int:
    """Build the vector store, removing an existing one first if ``force``."""
    retrieval = settings.retrieval
    store_path = Path(retrieval.vector_store_path)
    if force and store_path.exists():
        store_path.unlink()
        logger.info("Removed existing vector store", extra={"path": str(store_path)})

    retriever = create_retriever(retrieval)
    return retriever.build_from_directory(retrieval.docs_path, store_path)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="minirag",
        description="Answer questions from a directory of text documents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override (default from LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    docs_parser = subparsers.add_parser("docs", help="Ask a question")
    docs_parser.add_argument("question", nargs="+", help="Question text")

    build_parser = subparsers.add_parser("build", help="Build the vector store")
    build_parser.add_argument(
        "--force",
        action="store_true",
        help="Remove an existing store file and rebuild",
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(level=args.log_level or settings.log_level)

    try:
        if args.command == "build":
            chunks = build(settings, force=args.force)
            print(f"Indexed {chunks} chunks into {settings.retrieval.vector_store_path}")
        else:
            question = " ".join(args.question)
            response = asyncio.run(ask(settings, question))
            print_response(question, response)
    except MiniRAGError as e:
        logger.error(f"{e.code.value}: {e.message}", extra={"details": e.details})
        sys.exit(1)


if __name__ == "__main__":
    main()
