"""FastAPI application entry point with logging setup and liveness endpoints."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from leetcode_assistant.ai.llm_base import LLMError
from leetcode_assistant.config import settings
from leetcode_assistant.routers.chat import CHAT_ERROR_MESSAGE, router as chat_router

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    root_logger = logging.getLogger("leetcode_assistant")
    root_logger.setLevel(settings.log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


_configure_logging()

app = FastAPI(title="LeetCode Assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


@app.exception_handler(LLMError)
async def llm_unavailable_handler(request: Request, exc: LLMError) -> JSONResponse:
    """No provider could be built for this request."""
    logger.error("LLM provider unavailable: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": CHAT_ERROR_MESSAGE, "details": str(exc)},
    )


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "LeetCode Assistant Backend is running."


@app.get("/health")
async def health_check():
    """Health check endpoint for probes."""
    model_by_provider = {
        "google": settings.llm_model_google,
        "openai": settings.llm_model_openai,
    }
    return {
        "status": "healthy",
        "llm_provider": settings.llm_provider,
        "llm_model": model_by_provider.get(settings.llm_provider, ""),
    }


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    logger.info("Server running on port %d", settings.port)
    uvicorn.run(
        "leetcode_assistant.main:app",
        host=settings.backend_host,
        port=settings.port,
        reload=settings.backend_reload,
    )


if __name__ == "__main__":
    run()
