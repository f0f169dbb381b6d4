"""Pydantic models for the Ollama chat wire format.

Models:
    - Role: Speaker of a message
    - WireMessage: A message as sent in the request history
    - ChatOptions: Sampling options for the request
    - ChatRequest: Outgoing /api/chat payload
    - RecordMessage / StreamRecord: One inbound NDJSON event
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Speaker of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"


class WireMessage(BaseModel):
    """A single message in the history sent to the backend.

    Attributes:
        role: The speaker identifier (user or assistant).
        content: The message text.
    """

    role: Role
    content: str


class ChatOptions(BaseModel):
    """Model sampling options forwarded to Ollama."""

    temperature: float = Field(..., ge=0.0, le=2.0)


class ChatRequest(BaseModel):
    """Request payload for the Ollama /api/chat endpoint.

    Attributes:
        model: Model tag to run.
        messages: Ordered prompt history.
        stream: Always true; replies arrive as newline-delimited JSON.
        options: Sampling options.
    """

    model: str = Field(..., min_length=1)
    messages: list[WireMessage]
    stream: bool = True
    options: ChatOptions


class RecordMessage(BaseModel):
    """The ``message`` object of a streamed record."""

    model_config = ConfigDict(extra="ignore")

    role: Any = None
    content: str | None = None


class StreamRecord(BaseModel):
    """One decoded line of the streamed reply.

    Only ``message.content`` is validated; other backend fields
    (timings, eval counts, ...) are ignored, whatever their type.

    Attributes:
        message: Incremental message payload, if any.
        done: Whether the backend marked this as the final record.
        error: Backend error text reported mid-stream (only strings are reported).
    """

    model_config = ConfigDict(extra="ignore")

    message: RecordMessage | None = None
    done: Any = False
    error: Any = None

    @property
    def delta(self) -> str:
        """Text fragment carried by this record, or an empty string."""
        if self.message is None or self.message.content is None:
            return ""
        return self.message.content
