"""HTTP server (Starlette + uvicorn)."""

from .server import NOT_FOUND, create_app, main

__all__ = ["NOT_FOUND", "create_app", "main"]
