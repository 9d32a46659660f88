"""
pokerduel Server - FastAPI + WebSocket presentation boundary
"""

from pokerduel.server.app import app, create_app

__all__ = ["app", "create_app"]
