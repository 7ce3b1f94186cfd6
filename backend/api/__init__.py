"""
Licensor API package.

Provides the FastAPI application for developer accounts and licensing.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
