"""
Application factory with performance measurement middleware.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional

from flask import Flask, Response, current_app, g, jsonify

from microsave.config import Config
from microsave.errors import MicrosaveError

EXTENSION_KEY = "microsave"


class AppContext:
    """
    Process-scoped state for one application instance.

    Holds the instant the app was created; /performance reports uptime
    from it.  Created once in :func:`create_app`.
    """

    def __init__(self) -> None:
        self.started_at = time.perf_counter()

    def uptime_seconds(self) -> float:
        return time.perf_counter() - self.started_at


def get_app_context() -> AppContext:
    """Return the :class:`AppContext` of the application handling this request."""
    return current_app.extensions[EXTENSION_KEY]


def _configure_logging(level: str) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("microsave").setLevel(level)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the Flask application."""
    settings = Config()
    app = Flask(__name__)
    app.config.update(settings.as_flask_config())
    app.config["JSON_SORT_KEYS"] = False
    app.json.sort_keys = False
    if overrides:
        app.config.update(overrides)

    _configure_logging(app.config["LOG_LEVEL"])
    app.extensions[EXTENSION_KEY] = AppContext()

    # ── Performance middleware ──────────────────────────────────────────────

    @app.before_request
    def _start_timer() -> None:
        g.start_time = time.perf_counter()

    @app.after_request
    def _stop_timer(response: Response) -> Response:
        elapsed = (time.perf_counter() - g.start_time) * 1_000
        response.headers["X-Response-Time-Ms"] = f"{elapsed:.4f}"
        return response

    # ── Error handlers ──────────────────────────────────────────────────────

    @app.errorhandler(MicrosaveError)
    def rejected(exc: MicrosaveError) -> tuple[Response, int]:
        app.logger.warning("Rejected request: %s", exc)
        return jsonify({"error": type(exc).__name__, "message": str(exc)}), 422

    @app.errorhandler(400)
    def bad_request(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Bad Request", "message": str(exc)}), 400

    @app.errorhandler(404)
    def not_found(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Not Found", "message": str(exc)}), 404

    @app.errorhandler(405)
    def method_not_allowed(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Method Not Allowed", "message": str(exc)}), 405

    @app.errorhandler(500)
    def internal_error(exc: Any) -> tuple[Response, int]:
        return jsonify({"error": "Internal Server Error", "message": str(exc)}), 500

    # ── Register blueprints ─────────────────────────────────────────────────

    from microsave.routes.transactions import transactions_bp
    from microsave.routes.returns import returns_bp
    from microsave.routes.performance import performance_bp

    base = app.config["BASE_PATH"]
    app.register_blueprint(transactions_bp, url_prefix=base)
    app.register_blueprint(returns_bp, url_prefix=base)
    app.register_blueprint(performance_bp, url_prefix=base)

    return app
