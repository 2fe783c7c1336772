#!/usr/bin/env python3
"""
Account service launcher.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 127.0.0.1 --reload
  python main.py --log-level debug

Environment variables (see core/config.py):
  JWT_SECRET            Token signing key, at least 32 characters. When unset, a
                        public built-in key is used and a warning is logged.
  DATABASE_URL          SQLAlchemy URL. Defaults to SQLite at auth/accounts.db.
  TOKEN_EXPIRE_SECONDS  Token lifetime. Defaults to 7 days.
"""

import argparse

import uvicorn


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Run the account service HTTP API.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=3000, help="Port to listen on (default: 3000)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (default: info)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()
