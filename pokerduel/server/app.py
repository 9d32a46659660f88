"""
FastAPI Application Entry Point for pokerduel.

This module creates and configures the FastAPI application with:
- HTTP routes for sessions, rounds and actions
- WebSocket endpoint for real-time updates
- CORS middleware for the browser client
"""

import argparse
import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokerduel import __version__
from pokerduel.server.routes import router
from pokerduel.server.websocket import websocket_endpoint

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="pokerduel",
        description="Heads-up Texas Hold'em against a scripted opponent",
        version=__version__,
    )

    # The browser client may be served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.websocket("/ws")(websocket_endpoint)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    logger.info("pokerduel app created")
    return app


# Create the application instance
app = create_app()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pokerduel-server", description="pokerduel server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    return parser


def main(argv: Optional[List[str]] = None):
    """Run the server (for use as entry point)."""
    import uvicorn
    args = build_parser().parse_args(argv)
    uvicorn.run(
        "pokerduel.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
