"""
Performance metrics route.

Endpoint
--------
GET /blackrock/challenge/<version>/performance

Returns the application's uptime, current process RSS memory usage,
and active thread count.
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from microsave import get_app_context
from microsave.utils.performance import collect_performance_snapshot

performance_bp = Blueprint("performance", __name__)


@performance_bp.route("/performance", methods=["GET"])
def get_performance() -> tuple[Response, int]:
    """
    Return a live performance snapshot.

    Response body::

        {
            "time":    "HH:mm:ss.fff",
            "memory":  "XXX.XX MB",
            "threads": integer
        }

    * **time** – elapsed time since the application was created.
    * **memory** – current process RSS (from :mod:`psutil`).
    * **threads** – active Python thread count (``threading.active_count()``).
    """
    snapshot = collect_performance_snapshot(get_app_context().uptime_seconds())
    return jsonify(snapshot), 200
