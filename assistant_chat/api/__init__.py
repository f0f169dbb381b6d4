"""FastAPI host application for the chat client.

Endpoints:
    - GET /health: Service health status
    - GET /api/settings: Default backend settings

The NiceGUI chat page is mounted onto this app at startup.
"""

from assistant_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
