"""Newline framing for chunked NDJSON bodies.

Turns an arbitrary split of bytes into complete text records. Chunk
boundaries may fall anywhere, including inside a multi-byte UTF-8
character or in the middle of a record.
"""

import codecs
import logging
from collections.abc import AsyncIterable, AsyncIterator

logger = logging.getLogger(__name__)


class LineFramer:
    """Incremental splitter of a byte stream into newline-terminated records.

    Holds a stateful UTF-8 decoder and the unterminated tail of the last
    chunk. Invalid bytes are replaced rather than raised so that an
    aborted stream can never make framing fail.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._closed = False

    @property
    def pending(self) -> str:
        """Text received after the last newline, not yet emitted."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk and return the records it completed.

        Args:
            chunk: Next raw byte chunk of the body.

        Returns:
            Complete non-empty records in arrival order, without line endings.
        """
        if self._closed:
            return []

        self._buffer += self._decoder.decode(chunk)
        if "\n" not in self._buffer:
            return []

        *complete, self._buffer = self._buffer.split("\n")
        records: list[str] = []
        for line in complete:
            line = line.removesuffix("\r")
            if line.strip():
                records.append(line)
        return records

    def close(self) -> None:
        """End the stream, discarding any unterminated trailing record."""
        if self._closed:
            return
        self._closed = True
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        if tail.strip():
            logger.debug(f"Discarding unterminated trailing record ({len(tail)} chars)")


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Frame an async byte-chunk stream into complete records.

    Args:
        chunks: Raw body chunks, e.g. from ``open_chat_stream``.

    Yields:
        Each complete, non-empty record as soon as its newline arrives.
    """
    framer = LineFramer()
    try:
        async for chunk in chunks:
            for line in framer.feed(chunk):
                yield line
    finally:
        framer.close()
