"""Conversation state for a chat session.

Responsibilities:
    - Append-only message log with time-of-day greeting
    - Explicit handle on the reply currently being streamed
    - Post-stream markdown repair of finished replies

Contains no I/O; the streaming driver feeds it deltas.
"""

from assistant_chat.conversation.normalizer import normalize
from assistant_chat.conversation.state import (
    PLACEHOLDER,
    ConversationState,
    EmptyInputError,
    Message,
    StreamHandle,
    greeting,
)

__all__ = [
    "PLACEHOLDER",
    "ConversationState",
    "EmptyInputError",
    "Message",
    "StreamHandle",
    "greeting",
    "normalize",
]
