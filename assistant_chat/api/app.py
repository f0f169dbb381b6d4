"""HTTP host for the chat page.

The chat UI itself is a NiceGUI page mounted onto this app by ``main``;
FastAPI only adds the probes around it:

- ``GET /health``: liveness, answered without contacting Ollama
- ``GET /api/settings``: the host/model/temperature new sessions start from

The lifespan owns the process-wide Ollama client, so pooled connections
are released when uvicorn shuts down.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant_chat import __version__
from assistant_chat.backend.client import close_chat_client
from assistant_chat.backend.config import ChatSettings, get_chat_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log the backend in use, then close the shared Ollama client on exit.

    The client is created lazily by the first chat turn, so nothing is
    opened here.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    defaults = get_chat_settings()
    logger.info(
        f"Assistant Chat up; default backend {defaults.model_name} at {defaults.ollama_host}"
    )
    yield
    await close_chat_client()
    logger.info("Ollama client closed, Assistant Chat stopped")


def create_app() -> FastAPI:
    """Build the FastAPI app that hosts the chat page.

    Returns:
        App with the health and settings routes registered.
    """
    application = FastAPI(
        title="Assistant Chat",
        description=(
            "Browser chat client for a locally hosted Ollama server. "
            "Streams replies incrementally and renders them as markdown."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # The page can be embedded or probed from other local origins
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Report liveness without touching the model backend."""
        return {"status": "healthy", "service": "assistant-chat"}

    @application.get("/api/settings", response_model=ChatSettings)
    async def default_settings() -> ChatSettings:
        """Return the backend settings new chat sessions start from.

        Re-read on each call so edits to the environment show up
        without a restart.
        """
        return get_chat_settings()

    return application


app = create_app()
