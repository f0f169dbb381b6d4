"""Streaming pipeline for Ollama chat replies.

Turns a chunked HTTP body into ordered text fragments.

Responsibilities:
    - Streaming POST to /api/chat with httpx
    - Newline framing that survives arbitrary chunk splits
    - Tolerant JSON decoding of each record into a text delta

Each stage is lazy and preserves record order.
"""

from assistant_chat.streaming.decoding import (
    MalformedRecordError,
    decode_lines,
    decode_record,
    iter_deltas,
    parse_record,
)
from assistant_chat.streaming.framing import LineFramer, iter_lines
from assistant_chat.streaming.transport import StreamConnectionError, open_chat_stream

__all__ = [
    "LineFramer",
    "MalformedRecordError",
    "StreamConnectionError",
    "decode_lines",
    "decode_record",
    "iter_deltas",
    "iter_lines",
    "open_chat_stream",
    "parse_record",
]
