"""Shared builders for Ollama-style NDJSON bodies and a mock backend."""

import json
from collections.abc import AsyncIterator, Sequence

import httpx


def ndjson_body(
    deltas: Sequence[str],
    *,
    model: str = "test-model",
    done: bool = True,
) -> bytes:
    """Encode deltas as an Ollama /api/chat streaming body.

    Non-ASCII text is kept as raw UTF-8 so chunk splits can land inside
    multi-byte characters.
    """
    records = [
        {"model": model, "message": {"role": "assistant", "content": delta}, "done": False}
        for delta in deltas
    ]
    if done:
        records.append({
            "model": model,
            "message": {"role": "assistant", "content": ""},
            "done": True,
            "eval_count": len(deltas),
        })
    text = "".join(json.dumps(record, ensure_ascii=False) + "\n" for record in records)
    return text.encode("utf-8")


def split_at(body: bytes, cuts: Sequence[int]) -> list[bytes]:
    """Split bytes at the given offsets."""
    bounds = [0, *sorted(cuts), len(body)]
    return [body[start:end] for start, end in zip(bounds, bounds[1:])]


class MockOllama:
    """Scriptable stand-in for an Ollama server.

    Attributes:
        chunks: Body chunks streamed for a successful response.
        status_code: Response status; error statuses send ``error_body``.
        error_body: JSON (dict) or plain text (str) body for error responses.
        connect_error: If set, the request fails to connect.
        abort_after: Raise a read error after this many chunks.
        requests: Every request received.
    """

    def __init__(self) -> None:
        self.chunks: list[bytes] = []
        self.status_code = 200
        self.error_body: dict | str | None = None
        self.connect_error: str | None = None
        self.abort_after: int | None = None
        self.requests: list[httpx.Request] = []

    def reply_with(self, deltas: Sequence[str], chunk_size: int | None = None) -> None:
        """Stream the given deltas, optionally re-chunked to a fixed size."""
        body = ndjson_body(deltas)
        if chunk_size is None:
            self.chunks = [body]
        else:
            self.chunks = [body[i:i + chunk_size] for i in range(0, len(body), chunk_size)]

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error is not None:
            raise httpx.ConnectError(self.connect_error, request=request)
        if self.status_code >= 400:
            if isinstance(self.error_body, str):
                return httpx.Response(self.status_code, text=self.error_body)
            return httpx.Response(self.status_code, json=self.error_body or {})
        return httpx.Response(
            self.status_code,
            headers={"content-type": "application/x-ndjson"},
            content=self._stream(request),
        )

    async def _stream(self, request: httpx.Request) -> AsyncIterator[bytes]:
        for i, chunk in enumerate(self.chunks):
            if self.abort_after is not None and i >= self.abort_after:
                raise httpx.ReadError("connection reset by peer", request=request)
            yield chunk
