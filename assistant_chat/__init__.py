"""Assistant Chat - browser chat client for a locally hosted Ollama server.

Streams replies from the Ollama /api/chat endpoint and renders them
incrementally, combining httpx for streaming HTTP, Pydantic for data
validation, NiceGUI for the chat interface and FastAPI for hosting.

Components:
    - streaming: transport, line framing and delta decoding of NDJSON replies
    - conversation: message log, active stream handle and post-stream repair
    - backend: Ollama client service, settings and the per-turn stream driver
    - ui: NiceGUI chat page and render adapter
    - api: FastAPI host application
    - models: request/response schemas
"""

__version__ = "0.1.0"
