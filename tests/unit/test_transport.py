"""Unit tests for the streaming HTTP transport."""

import httpx
import pytest
import pytest_check as check

from assistant_chat.models.schemas import ChatOptions, ChatRequest, Role, WireMessage
from assistant_chat.streaming.transport import StreamConnectionError, open_chat_stream
from tests.support import MockOllama

URL = "http://ollama.test/api/chat"


@pytest.fixture
def request_payload() -> ChatRequest:
    """Return a minimal streaming chat request."""
    return ChatRequest(
        model="test-model",
        messages=[WireMessage(role=Role.USER, content="hi")],
        options=ChatOptions(temperature=0.7),
    )


async def collect(
    client: httpx.AsyncClient, payload: ChatRequest
) -> list[bytes]:
    return [chunk async for chunk in open_chat_stream(URL, payload, client=client)]


class TestOpenChatStream:
    """Tests for open_chat_stream."""

    async def test_posts_streaming_chat_request(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """The request body carries model, messages, stream and options."""
        mock_ollama.reply_with(["ok"])

        await collect(mock_http, request_payload)

        sent = mock_ollama.requests[-1]
        check.equal(sent.method, "POST")
        check.equal(str(sent.url), URL)
        check.equal(
            mock_ollama.last_payload,
            {
                "model": "test-model",
                "messages": [{"role": "user", "content": "hi"}],
                "stream": True,
                "options": {"temperature": 0.7},
            },
        )

    async def test_yields_body_chunks_in_order(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """Chunks arrive as sent, with no bytes lost."""
        mock_ollama.chunks = [b'{"message":', b'{"content":"a"}}\n', b"\n"]

        chunks = await collect(mock_http, request_payload)

        assert b"".join(chunks) == b'{"message":{"content":"a"}}\n\n'

    async def test_connection_failure_raises(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """A refused connection maps to StreamConnectionError."""
        mock_ollama.connect_error = "connection refused"

        with pytest.raises(StreamConnectionError, match="Connection failed"):
            await collect(mock_http, request_payload)

    def test_stream_connection_error_is_a_connection_error(self) -> None:
        """Callers can catch the builtin ConnectionError."""
        assert issubclass(StreamConnectionError, ConnectionError)

    async def test_error_status_reports_backend_message(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """Ollama's JSON error text ends up in the exception."""
        mock_ollama.status_code = 404
        mock_ollama.error_body = {"error": "model 'test-model' not found"}

        with pytest.raises(StreamConnectionError) as exc_info:
            await collect(mock_http, request_payload)

        check.is_in("HTTP 404", str(exc_info.value))
        check.is_in("model 'test-model' not found", str(exc_info.value))

    async def test_error_status_with_plain_text_body(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """Non-JSON error bodies are reported verbatim."""
        mock_ollama.status_code = 502
        mock_ollama.error_body = "Bad Gateway from proxy"

        with pytest.raises(StreamConnectionError, match="HTTP 502: Bad Gateway from proxy"):
            await collect(mock_http, request_payload)

    async def test_abort_before_any_bytes_raises(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """A body that cannot be read at all is a connection error."""
        mock_ollama.reply_with(["never"])
        mock_ollama.abort_after = 0

        with pytest.raises(StreamConnectionError, match="No readable response body"):
            await collect(mock_http, request_payload)

    async def test_abort_mid_stream_ends_quietly(
        self,
        mock_ollama: MockOllama,
        mock_http: httpx.AsyncClient,
        request_payload: ChatRequest,
    ) -> None:
        """An early abort after data keeps what arrived and stops."""
        mock_ollama.chunks = [b"first\n", b"second\n", b"third\n"]
        mock_ollama.abort_after = 2

        chunks = await collect(mock_http, request_payload)

        assert chunks == [b"first\n", b"second\n"]

    async def test_invalid_host_raises(self, request_payload: ChatRequest) -> None:
        """A host without a usable scheme fails as a connection error."""
        stream = open_chat_stream("localhost:11434/api/chat", request_payload)

        with pytest.raises(StreamConnectionError):
            async for _ in stream:
                pass
