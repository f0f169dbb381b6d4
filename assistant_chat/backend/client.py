"""Ollama chat client service with streaming support.

Core module for talking to the model backend.

Architecture Decisions:

1. **Shared AsyncClient** - Connection setup to the Ollama server is reused
   across turns and sessions. The client is closed on application shutdown.

2. **Singleton Pattern** - All chat pages share one service instance, so there
   is one connection pool per process rather than one per browser tab.

3. **Per-request settings** - Host and model are editable per session in the
   sidebar, so every call accepts an optional ChatSettings override instead
   of baking them into the service.

4. **Streaming Generator** - The transport yields raw bytes. Framing and
   decoding are composed here so callers see only clean text deltas.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import aclosing

import httpx

from assistant_chat.backend.config import ChatSettings, get_chat_settings
from assistant_chat.conversation.normalizer import normalize
from assistant_chat.models.schemas import ChatOptions, ChatRequest, WireMessage
from assistant_chat.streaming import iter_deltas, iter_lines, open_chat_stream

logger = logging.getLogger(__name__)


class OllamaChatClient:
    """Service for streaming chat completions from Ollama.

    Wraps the streaming pipeline with:
    - A pooled httpx.AsyncClient
    - Request payload construction from settings
    - Singleton lifecycle management
    """

    def __init__(
        self,
        settings: ChatSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the chat client service.

        Args:
            settings: Optional default settings.
                      Loads from environment if not provided.
            client: Optional preconfigured HTTP client.
        """
        self._settings = settings or get_chat_settings()
        self._client = client or self._create_client()

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._settings.request_timeout)

    @property
    def settings(self) -> ChatSettings:
        return self._settings

    def build_request(
        self,
        messages: Sequence[WireMessage],
        settings: ChatSettings | None = None,
    ) -> ChatRequest:
        """Build the /api/chat payload for a prompt history.

        Args:
            messages: Ordered prompt history.
            settings: Override for the default settings.

        Returns:
            A streaming ChatRequest.
        """
        settings = settings or self._settings
        return ChatRequest(
            model=settings.model_name,
            messages=list(messages),
            stream=True,
            options=ChatOptions(temperature=settings.temperature),
        )

    async def stream_chat(
        self,
        messages: Sequence[WireMessage],
        settings: ChatSettings | None = None,
    ) -> AsyncIterator[str]:
        """Stream reply fragments for a prompt history.

        Args:
            messages: Ordered prompt history.
            settings: Override for the default settings.

        Yields:
            Non-empty text deltas in arrival order.

        Raises:
            StreamConnectionError: If the backend cannot be reached.
        """
        settings = settings or self._settings
        request = self.build_request(messages, settings)
        logger.info(
            f"Streaming {settings.model_name} from {settings.ollama_host} "
            f"({len(request.messages)} messages)"
        )

        # Closing the transport releases the response even if the consumer stops early
        chunks = open_chat_stream(settings.chat_url, request, client=self._client)
        async with aclosing(chunks):
            async for delta in iter_deltas(iter_lines(chunks)):
                yield delta

    async def get_response(
        self,
        messages: Sequence[WireMessage],
        settings: ChatSettings | None = None,
    ) -> str:
        """Get the complete, normalized reply for a prompt history.

        Non-streaming alternative for simpler use cases.

        Raises:
            StreamConnectionError: If the backend cannot be reached.
        """
        parts = [delta async for delta in self.stream_chat(messages, settings)]
        return normalize("".join(parts))

    async def aclose(self) -> None:
        await self._client.aclose()


# Module-level singleton instance
_chat_client: OllamaChatClient | None = None


def get_chat_client() -> OllamaChatClient:
    """Get or create the global chat client.

    Uses singleton pattern for resource efficiency.

    Returns:
        The OllamaChatClient instance.
    """
    global _chat_client
    if _chat_client is None:
        _chat_client = OllamaChatClient()
    return _chat_client


async def close_chat_client() -> None:
    """Close and forget the global chat client, if one was created."""
    global _chat_client
    if _chat_client is not None:
        await _chat_client.aclose()
        _chat_client = None
