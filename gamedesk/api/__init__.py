"""REST API layer for GameDesk.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by the gamedesk.app bootstrap).
"""

from gamedesk.api.app import create_app

build_app = create_app

__all__ = ["build_app", "create_app"]
