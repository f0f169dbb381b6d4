"""Streaming HTTP transport for the Ollama /api/chat endpoint.

Issues a single POST and exposes the response body as raw byte chunks.
"""

import logging
from collections.abc import AsyncIterator

import httpx

from assistant_chat.models.schemas import ChatRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class StreamConnectionError(ConnectionError):
    """Raised when the request fails or the response has no readable body."""

    pass


def _error_detail(response: httpx.Response) -> str:
    """Extract the backend's error text from a failed response.

    Ollama reports failures as ``{"error": "..."}``; anything else
    falls back to the raw body or the reason phrase.
    """
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return response.text.strip() or response.reason_phrase


async def open_chat_stream(
    url: str,
    request: ChatRequest,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> AsyncIterator[bytes]:
    """Stream the raw body of a chat completion request.

    The returned iterator is lazy and can be consumed once. A transport
    failure after the first byte ends the iterator quietly, since the
    chunks already delivered remain valid.

    Args:
        url: Full URL of the chat endpoint.
        request: Payload to POST as JSON.
        client: Shared client to use. A temporary one is created
                (and closed) when omitted.
        timeout: Timeout for the temporary client.

    Yields:
        Raw byte chunks as they arrive.

    Raises:
        StreamConnectionError: If the request cannot be sent, the server
            answers with an error status, or no body can be read.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout)

    try:
        async with client.stream(
            "POST",
            url,
            json=request.model_dump(mode="json"),
            headers={"Accept": "application/x-ndjson"},
        ) as response:
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                await response.aread()
                raise StreamConnectionError(
                    f"HTTP {response.status_code}: {_error_detail(response)}"
                ) from e

            received = False
            try:
                async for chunk in response.aiter_bytes():
                    if not chunk:
                        continue
                    received = True
                    yield chunk
            except httpx.RequestError as e:
                if not received:
                    raise StreamConnectionError(f"No readable response body: {e}") from e
                logger.warning(f"Stream from {url} aborted early: {e}")
    except (httpx.RequestError, httpx.InvalidURL) as e:
        raise StreamConnectionError(f"Connection failed: {e}") from e
    finally:
        if owns_client:
            await client.aclose()
