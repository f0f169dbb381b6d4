"""Chat backend configuration with environment variable loading.

Pydantic-based settings for talking to an Ollama server.
Host and model are also editable per session from the chat sidebar.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_MODEL = "the-assistant-gemma3-4b:latest"


class ChatSettings(BaseModel):
    """Configuration for the Ollama chat backend.

    Attributes:
        ollama_host: Base URL of the Ollama server.
        model_name: Model tag to chat with.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        request_timeout: Seconds to wait on connect/read before giving up.
    """

    ollama_host: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST),
        description="Ollama server base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_MODEL", DEFAULT_MODEL),
        description="Model tag to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("OLLAMA_TIMEOUT", "120")),
        gt=0.0,
        description="HTTP timeout in seconds",
    )

    @field_validator("ollama_host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Strip whitespace and trailing slash; reject empty hosts."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("Ollama host required. Set OLLAMA_HOST in .env")
        return v

    @field_validator("model_name")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Validate that a model tag is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("Model required. Set OLLAMA_MODEL in .env")
        return v.strip()

    @property
    def chat_url(self) -> str:
        """Full URL of the streaming chat endpoint."""
        return f"{self.ollama_host}/api/chat"


def get_chat_settings() -> ChatSettings:
    """Create chat settings from environment.

    Returns:
        Configured ChatSettings instance.

    Raises:
        ValueError: If host or model resolve to empty strings.
    """
    return ChatSettings()
