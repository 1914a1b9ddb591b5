#!/usr/bin/env python3
"""
Task Board Server
-----------------
JSON API over an in-memory CardStore.

Usage:
    taskboard-server                      # or: python -m taskboard.server
    taskboard-server --port 8080 --no-seed

API:
    GET    /api/cards[?status=]            → { cards, grouped, total }
    GET    /api/cards/<id>                 → card
    POST   /api/cards                      → card (201)
    PUT    /api/cards/<id>                 → card
    DELETE /api/cards/<id>                 → card
    PATCH  /api/cards/batch-update-status  → [card, ...]
           body: { updates: [{ id, status }, ...] }

Every response is wrapped:
    { success: true,  data, message? }
    { success: false, error, message }
"""

import argparse
import logging
import sys
from typing import Any, Optional

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from . import __version__
from .config import BoardConfig
from .errors import NotFound, ValidationError
from .store import CardStore

logger = logging.getLogger(__name__)

API_PREFIX = "/api/cards"


# ── Helpers ──────────────────────────────────────────────────────────────────

def ok(data: Any, message: Optional[str] = None, status: int = 200):
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(error: str, message: str, status: int):
    return jsonify({"success": False, "error": error, "message": message}), status


def get_store() -> CardStore:
    return current_app.extensions["card_store"]


def json_body() -> dict:
    if not request.get_data():
        return {}
    data = request.get_json(force=True, silent=True)
    if data is None:
        raise ValidationError("Request body is not valid JSON")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# ── App factory ──────────────────────────────────────────────────────────────

def create_app(config: Optional[BoardConfig] = None, store: Optional[CardStore] = None) -> Flask:
    """Build the Flask app; the store lives as long as the app does."""
    config = config or BoardConfig()
    if store is None:
        store = CardStore(seed=config.seed_examples)

    app = Flask(__name__)
    app.config["DEBUG"] = config.debug
    app.json.sort_keys = False
    app.extensions["card_store"] = store

    register_error_handlers(app)
    register_routes(app)
    return app


def register_error_handlers(app: Flask) -> None:

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        logger.warning(f"{request.method} {request.path} rejected: {e}")
        return fail("Invalid request", str(e), 400)

    @app.errorhandler(NotFound)
    def handle_not_found(e):
        logger.warning(f"{request.method} {request.path}: {e}")
        return fail("Card not found", str(e), 404)

    @app.errorhandler(HTTPException)
    def handle_http(e):
        if e.code == 404:
            return jsonify({
                "success": False,
                "error": "Route not found",
                "path": request.path,
            }), 404
        return fail(e.name, e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"{request.method} {request.path} failed")
        return fail("Internal server error", str(e), 500)


def register_routes(app: Flask) -> None:

    @app.route("/")
    def index():
        return jsonify({
            "message": "Task board API server is running",
            "version": __version__,
            "endpoints": {
                f"GET {API_PREFIX}": "List all cards",
                f"GET {API_PREFIX}/:id": "Get one card",
                f"POST {API_PREFIX}": "Create a card",
                f"PUT {API_PREFIX}/:id": "Update a card",
                f"DELETE {API_PREFIX}/:id": "Delete a card",
                f"PATCH {API_PREFIX}/batch-update-status": "Move many cards between columns",
            },
        })

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "cards": len(get_store())})

    @app.route(API_PREFIX, methods=["GET"])
    def api_list_cards():
        listing = get_store().list_cards(request.args.get("status"))
        return ok(listing.to_dict())

    @app.route(f"{API_PREFIX}/<card_id>", methods=["GET"])
    def api_get_card(card_id):
        return ok(get_store().get(card_id).to_dict())

    @app.route(API_PREFIX, methods=["POST"])
    def api_create_card():
        data = json_body()
        card = get_store().create(
            data.get("title"),
            data.get("description"),
            data.get("status"),
        )
        return ok(card.to_dict(), "Card created", 201)

    @app.route(f"{API_PREFIX}/<card_id>", methods=["PUT"])
    def api_update_card(card_id):
        card = get_store().update(card_id, json_body())
        return ok(card.to_dict(), "Card updated")

    @app.route(f"{API_PREFIX}/<card_id>", methods=["DELETE"])
    def api_delete_card(card_id):
        card = get_store().delete(card_id)
        return ok(card.to_dict(), "Card deleted")

    @app.route(f"{API_PREFIX}/batch-update-status", methods=["PATCH"])
    def api_batch_update_status():
        updated = get_store().batch_update_status(json_body().get("updates"))
        return ok([c.to_dict() for c in updated], f"Updated {len(updated)} cards")


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="Task Board Server")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--config", help="Path to taskboard.yaml (overrides TASKBOARD_CONFIG)")
    parser.add_argument("--no-seed", action="store_true", help="Start with an empty board")
    args = parser.parse_args(argv)

    config = BoardConfig.load(args.config)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.no_seed:
        config.seed_examples = False
    config.check()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [taskboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = create_app(config)
    logger.info(f"Serving task board on http://{config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=True)


if __name__ == "__main__":
    main()
