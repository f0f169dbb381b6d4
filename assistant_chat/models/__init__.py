"""Pydantic models for backend requests and streamed records.

Provides type safety and validation for everything crossing the HTTP boundary.
"""

from assistant_chat.models.schemas import (
    ChatOptions,
    ChatRequest,
    RecordMessage,
    Role,
    StreamRecord,
    WireMessage,
)

__all__ = [
    "ChatOptions",
    "ChatRequest",
    "RecordMessage",
    "Role",
    "StreamRecord",
    "WireMessage",
]
