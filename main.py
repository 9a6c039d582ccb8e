#!/usr/bin/env python3
"""
Postboard -- user registration and authenticated post creation over HTTP.

Usage:
  python main.py
  python main.py --reload

Environment variables (see core/config.py for the full list):
  SECRET_KEY     Token signing key, 32+ characters. Required unless DEBUG=true.
  DATABASE_URL   SQLAlchemy URL of the store. Default: sqlite:///postboard.db
  HOST / PORT    Listener address. Default: 127.0.0.1:5000
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Postboard API server.")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only).")
    args = parser.parse_args()

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
