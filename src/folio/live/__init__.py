"""Live reload support for the development server."""

from .reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
