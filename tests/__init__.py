"""Test package for Assistant Chat.

Provides coverage for all components with unit tests for isolated logic
and integration tests for the streaming workflow.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end streaming and HTTP app tests
    - support.py: NDJSON builders and a mock Ollama backend

The Ollama server is replaced by httpx.MockTransport; no live backend is needed.
Leverages pytest with pytest-check for soft assertions and hypothesis for
property-based tests.
"""
