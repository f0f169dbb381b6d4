"""Ollama backend access for the chat client.

Responsibilities:
    - Settings loaded from the environment, overridable per session
    - Pooled streaming client composed from the streaming pipeline
    - Per-turn driver feeding deltas into a ConversationState

Maintains clean separation from the UI layer.
"""

from assistant_chat.backend.client import OllamaChatClient, close_chat_client, get_chat_client
from assistant_chat.backend.config import ChatSettings, get_chat_settings
from assistant_chat.backend.session import stream_chat_response

__all__ = [
    "ChatSettings",
    "OllamaChatClient",
    "close_chat_client",
    "get_chat_client",
    "get_chat_settings",
    "stream_chat_response",
]
