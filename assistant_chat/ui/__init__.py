"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with incremental streaming updates
    - Animated thinking indicator while a reply is pending
    - Per-session Ollama host and model settings

Contains minimal business logic. Delegates streaming to the backend package
and display decisions to the render adapter.
"""
