#!/usr/bin/env python3
"""
pokerduel - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload]
"""

from pokerduel.server.app import main


if __name__ == "__main__":
    main()
