from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Blueprint, Response, abort, jsonify, request

from microsave.errors import ConfigurationError
from microsave.services.return_service import calculate_returns
from microsave.utils.financial import HUNDRED, INDEX, NPS, ONE, ZERO, Scheme, to_decimal
from microsave.utils.payload import (
    parse_periods,
    parse_transaction,
    positive_decimal,
    positive_int,
    require_field,
    require_non_empty_list,
)

logger = logging.getLogger(__name__)

returns_bp = Blueprint("returns", __name__)


def _parse_returns_body(body: Dict[str, Any]) -> Dict[str, Any]:
    age = positive_int(body, "age")
    wage = positive_decimal(body, "wage")

    # inflation is a percentage (e.g. 5.5) → convert to decimal (0.055)
    percent = to_decimal(require_field(body, "inflation"))
    if ZERO < percent < ONE:
        logger.warning(
            "inflation %s looks like a decimal rate; it is read as a percentage (%s%%)",
            percent, percent,
        )
    inflation = percent / HUNDRED

    periods = parse_periods(body)
    if not periods["k_ranges"]:
        raise ConfigurationError("At least one k period must be supplied.")

    # ceiling / remanent may be omitted; they are derived from amount
    transactions = [
        parse_transaction(t, derive_missing=True)
        for t in require_non_empty_list(body, "transactions")
    ]

    return {
        "age": age,
        "wage": wage,
        "inflation": inflation,
        "transactions": transactions,
        **periods,
    }


def _returns(scheme: Scheme) -> tuple[Response, int]:
    body: Dict[str, Any] | None = request.get_json(silent=True)
    if body is None:
        abort(400, description="Invalid or missing JSON body.")

    params = _parse_returns_body(body)
    result = calculate_returns(scheme, **params)
    return jsonify(result.to_dict()), 200


#Endpoint: NPS returns
@returns_bp.route("/returns:nps", methods=["POST"])
def returns_nps() -> tuple[Response, int]:
    return _returns(NPS)


#Endpoint: Index returns
@returns_bp.route("/returns:index", methods=["POST"])
def returns_index() -> tuple[Response, int]:
    return _returns(INDEX)
