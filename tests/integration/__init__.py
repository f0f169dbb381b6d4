"""Integration tests for components working together as a system.

Coverage:
    - Full turn from send to finalized reply over a mock Ollama transport
    - Failure recovery for refused connections, error statuses and aborts
    - FastAPI host routes via ASGITransport
"""
