"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - streaming/: Framing, decoding and transport error mapping
    - conversation/: Message log rules and post-stream normalization
    - backend/: Settings validation and client request building
    - ui/: Render adapter and session settings
"""
