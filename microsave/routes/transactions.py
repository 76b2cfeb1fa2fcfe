from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, Response, abort, jsonify, request

from microsave.errors import ConfigurationError
from microsave.services.temporal_service import apply_temporal_filter
from microsave.services.transaction_service import build_transactions
from microsave.services.validation_service import validate_transactions
from microsave.utils.payload import (
    parse_expense,
    parse_periods,
    parse_transaction,
    positive_decimal,
    require_non_empty_list,
)

transactions_bp = Blueprint("transactions", __name__)


def _json_body() -> Any:
    body = request.get_json(silent=True)
    if body is None:
        abort(400, description="Invalid or missing JSON body.")
    return body


#Endpoint: parse
@transactions_bp.route("/transactions:parse", methods=["POST"])
def parse_transactions() -> tuple[Response, int]:
    body = _json_body()

    # Accept a bare list or {"expenses": [...]}
    if isinstance(body, dict):
        expenses_raw = require_non_empty_list(body, "expenses")
    elif isinstance(body, list) and body:
        expenses_raw = body
    else:
        raise ConfigurationError("Expenses list is empty or missing.")

    expenses = [parse_expense(e) for e in expenses_raw]
    result = build_transactions(expenses)
    return jsonify(result.to_dict()), 200


#Endpoint: validator
@transactions_bp.route("/transactions:validator", methods=["POST"])
def validator_transactions() -> tuple[Response, int]:
    body: Dict[str, Any] = _json_body()

    wage = positive_decimal(body, "wage")
    transactions = [
        parse_transaction(t) for t in require_non_empty_list(body, "transactions")
    ]

    result = validate_transactions(wage=wage, transactions=transactions)
    return jsonify(result.to_dict()), 200


#Endpoint: filter (temporal constraints)
@transactions_bp.route("/transactions:filter", methods=["POST"])
def filter_transactions() -> tuple[Response, int]:
    body: Dict[str, Any] = _json_body()

    periods = parse_periods(body)
    transactions = [
        parse_transaction(t) for t in require_non_empty_list(body, "transactions")
    ]

    result = apply_temporal_filter(transactions=transactions, **periods)
    return jsonify(result.to_dict()), 200
