"""HTTP API for Area Scout."""

from .routes import router

__all__ = ["router"]
