"""HTTP API for the claims dashboard."""

from .app import app

__all__ = ["app"]
