"""Small greeting service: a home page, a hello and a JSON-driven goodbye."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Optional, Sequence

from flask import Flask, Response, request

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080

_TEXT = "text/plain; charset=utf-8"
_JSON = "application/json; charset=utf-8"
_DECODER = json.JSONDecoder()


class _BindError(Exception):
    """The request body is not a JSON object of strings."""


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, content_type=_TEXT)


def _error(message: str, status: int) -> Response:
    body = json.dumps({"error": message}, ensure_ascii=False, separators=(",", ":"))
    return Response(body, status=status, content_type=_JSON)


def _bind_messages() -> dict[str, str]:
    """Decode the first JSON value of the body as a string-to-string mapping."""
    text = request.get_data().decode("utf-8", errors="replace").lstrip(" \t\r\n")
    if not text:
        raise _BindError("EOF")
    try:
        value, _ = _DECODER.raw_decode(text)
    except ValueError as exc:
        raise _BindError(str(exc)) from exc
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _BindError("body must be a JSON object")
    if not all(isinstance(v, str) for v in value.values()):
        raise _BindError("every value must be a string")
    return value


def create_app() -> Flask:
    """Build the WSGI application with the greeting routes."""
    app = Flask(__name__)

    @app.get("/")
    def home_get() -> Response:
        return _text("Welcome to the home page!")

    @app.post("/")
    def home_post() -> Response:
        return _text("Post to the home page!")

    @app.put("/")
    def home_put() -> Response:
        return _text("Put to the home page!")

    @app.delete("/")
    def home_delete() -> Response:
        return _text("Delete the home page!")

    @app.get("/hello")
    def hello() -> Response:
        return _text("Hello, world!")

    @app.post("/bye")
    def bye() -> Response:
        try:
            messages = _bind_messages()
        except _BindError:
            return _error("Failed to bind JSON", 400)
        message = messages.get("message")
        if message is None:
            return _error("Message field is missing", 400)
        return _text(f"Received POST request with message: {message}")

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(_exc: Any) -> Response:
        return Response("404 page not found", status=404, content_type="text/plain")

    return app


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Serve the greeting application."""
    parser = argparse.ArgumentParser(prog="stockroom-greetings", description="Greeting API.")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    app = create_app()
    logger.info("Server started at http://localhost:%d/", args.port)
    app.run(host="0.0.0.0", port=args.port)


if __name__ == "__main__":
    main()