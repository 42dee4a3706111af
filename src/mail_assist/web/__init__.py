"""Web application entry point for Mail Assist."""

from .app import create_app

__all__ = ["create_app"]
