"""Development entrypoint for the Munda Manager HTTP API."""

from __future__ import annotations

import argparse

import uvicorn

from munda.api.app import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Munda Manager API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    args = parser.parse_args()

    if args.reload:
        uvicorn.run("munda.api.app:app", host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
