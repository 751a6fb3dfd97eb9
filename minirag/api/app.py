"""FastAPI application entry point.

Configures the application with logging, exception handling, health checks
and the retrieval routes. The vector store is loaded (or built) at startup.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from minirag import __version__
from minirag.api.routes import router
from minirag.bootstrap import create_retriever
from minirag.config import get_settings
from minirag.exceptions import ErrorCode, MiniRAGError
from minirag.llm.client import OllamaClient
from minirag.logging_config import get_logger, setup_logging
from minirag.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from minirag.rag.pipeline import RAGPipeline

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Loads or builds the vector store and wires the RAG pipeline.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting minirag",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
        },
    )

    retrieval = settings.retrieval
    retriever = create_retriever(retrieval)
    retriever.load_or_build(retrieval.docs_path, retrieval.vector_store_path)

    llm_client = OllamaClient(settings.llm)
    app.state.retriever = retriever
    app.state.pipeline = RAGPipeline(retriever, llm_client, mode=settings.llm.mode)

    yield

    await llm_client.close()
    logger.info("Shutting down minirag")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="minirag",
        description="Document question answering over a local hashed-vector store",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(MetricsMiddleware)
    app.add_exception_handler(MiniRAGError, minirag_exception_handler)

    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["Metrics"])
    app.include_router(router)

    return app


async def minirag_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert MiniRAGError exceptions to structured JSON responses."""
    if not isinstance(exc, MiniRAGError):
        return JSONResponse(
            status_code=500,
            content={"error": {"code": "RAG-1000", "message": str(exc), "details": {}}},
        )

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=_get_status_code(exc.code),
        content=exc.to_dict(),
    )


def _get_status_code(code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if code in (ErrorCode.VALIDATION_ERROR,):
        return 400
    if code in (ErrorCode.DOCUMENT_NOT_FOUND,):
        return 404
    if code in (ErrorCode.STORE_NOT_READY, ErrorCode.LLM_UNAVAILABLE):
        return 503
    if code in (ErrorCode.LLM_TIMEOUT,):
        return 504
    return 500


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> dict[str, Any]:
    """Readiness probe: ready once the vector store is loaded.

    Returns:
        Readiness status with component checks.
    """
    retriever = getattr(request.app.state, "retriever", None)
    checks: dict[str, str] = {
        "config": "ok",
        "vector_store": "ok" if retriever is not None else "not_loaded",
    }
    all_ok = all(v == "ok" for v in checks.values())

    body: dict[str, Any] = {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if retriever is not None:
        body["documents"] = retriever.vector_store.document_count()
    return body


async def liveness_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
