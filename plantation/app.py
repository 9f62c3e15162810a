"""Flask application exposing the plantation service over HTTP."""

from __future__ import annotations

import argparse
import logging
import uuid
from collections.abc import Sequence

from flask import Flask, jsonify, request

from .config import load_config
from .handlers import INVALID_REQUEST, Response, Server
from .repository import PostgresRepository

logger = logging.getLogger(__name__)

DEFAULT_PORT = 1323


def _reply(response: Response):
    return jsonify(response.body), response.status


def _bad_request():
    return jsonify({"error": INVALID_REQUEST}), 400


def _parse_uuid(raw: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(raw)
    except ValueError:
        return None


def create_app(server: Server) -> Flask:
    """Build the Flask application routing requests to *server*."""
    app = Flask(__name__)

    @app.after_request
    def _log_request(response):
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    @app.post("/estate")
    def post_estate():
        return _reply(server.post_estate(request.get_data()))

    @app.post("/estate/<estate_id>/tree")
    def post_tree(estate_id: str):
        parsed = _parse_uuid(estate_id)
        if parsed is None:
            return _bad_request()
        return _reply(server.post_tree(parsed, request.get_data()))

    @app.get("/estate/<estate_id>/stats")
    def get_stats(estate_id: str):
        parsed = _parse_uuid(estate_id)
        if parsed is None:
            return _bad_request()
        return _reply(server.get_stats(parsed))

    @app.get("/estate/<estate_id>/drone-plan")
    def get_drone_plan(estate_id: str):
        parsed = _parse_uuid(estate_id)
        if parsed is None:
            return _bad_request()
        raw = request.args.get("max_distance")
        max_distance = None
        if raw is not None:
            try:
                max_distance = int(raw)
            except ValueError:
                return _bad_request()
        return _reply(server.get_drone_plan(parsed, max_distance))

    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Load configuration, connect to the database and serve HTTP."""
    parser = argparse.ArgumentParser(prog="plantation", description="Plantation management service.")
    parser.add_argument("--config", default=".env", help="dotenv file with DATABASE_URL and SCALE_FACTOR")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        logger.error("Error loading config: %s", exc)
        return 1

    repository = PostgresRepository(config.database_url)
    logger.info("Successfully initialized repository")
    app = create_app(Server(repository, config))
    try:
        app.run(host=args.host, port=args.port)
    except KeyboardInterrupt:
        pass
    finally:
        repository.close()
    return 0