#!/usr/bin/env python3
"""
Caprio Fashion API -- accounts, product catalog and wishlists.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (see core/config.py for the full list):
  SECRET_KEY       Token signing key, at least 32 characters. Required unless DEBUG=true.
  DEBUG            true to auto-generate a throwaway SECRET_KEY for local development.
  PORT             Listening port (default 4000).
  DATABASE_URL     SQLAlchemy URL of the single-file store (default sqlite:///caprio.db).
  ADMIN_EMAIL      Email of the bootstrap admin account.
  ADMIN_PASSWORD   Password of the bootstrap admin account (used only on first start).
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Run the Caprio Fashion API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listening port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart the server when source files change")
    args = parser.parse_args()

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
