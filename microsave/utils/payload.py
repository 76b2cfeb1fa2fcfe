"""
Request-body parsing shared by the route blueprints.

Turns decoded JSON into the typed structures the services consume.
Structural problems raise :class:`~microsave.errors.ConfigurationError`;
malformed timestamps or numbers raise :class:`~microsave.errors.ParseError`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from microsave.errors import ConfigurationError
from microsave.models.schemas import Expense, KRange, PRule, QRule, Transaction
from microsave.utils.financial import ZERO, compute_ceiling, compute_remanent, to_decimal
from microsave.utils.time_utils import parse_timestamp


#Internal field-access helpers
def require_field(obj: Dict[str, Any], key: str, what: str = "Request") -> Any:
    if not isinstance(obj, dict):
        raise ConfigurationError(f"{what} must be a JSON object.")
    if key not in obj:
        raise ConfigurationError(f"{what} missing field: {key!r}")
    return obj[key]


def require_list(obj: Dict[str, Any], key: str) -> List[Any]:
    value = require_field(obj, key)
    if not isinstance(value, list):
        raise ConfigurationError(f"{key!r} must be a list.")
    return value


def require_non_empty_list(obj: Dict[str, Any], key: str) -> List[Any]:
    value = require_list(obj, key)
    if not value:
        raise ConfigurationError(f"{key!r} list is empty.")
    return value


def optional_list(obj: Dict[str, Any], key: str) -> List[Any]:
    if not isinstance(obj, dict):
        raise ConfigurationError("Request must be a JSON object.")
    value = obj.get(key) or []
    if not isinstance(value, list):
        raise ConfigurationError(f"{key!r} must be a list.")
    return value


def positive_decimal(obj: Dict[str, Any], key: str) -> Decimal:
    value = to_decimal(require_field(obj, key))
    if value <= ZERO:
        raise ConfigurationError(f"{key!r} must be a positive number.")
    return value


def positive_int(obj: Dict[str, Any], key: str) -> int:
    value = require_field(obj, key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigurationError(f"{key!r} must be an integer, got {type(value).__name__}.")
    if value <= 0:
        raise ConfigurationError(f"{key!r} must be a positive integer.")
    return value


#Period rules
def parse_q_rule(raw: Dict[str, Any]) -> QRule:
    return QRule(
        fixed=to_decimal(require_field(raw, "fixed", "Q rule")),
        start=parse_timestamp(require_field(raw, "start", "Q rule")),
        end=parse_timestamp(require_field(raw, "end", "Q rule")),
    )


def parse_p_rule(raw: Dict[str, Any]) -> PRule:
    return PRule(
        extra=to_decimal(require_field(raw, "extra", "P rule")),
        start=parse_timestamp(require_field(raw, "start", "P rule")),
        end=parse_timestamp(require_field(raw, "end", "P rule")),
    )


def parse_k_range(raw: Dict[str, Any]) -> KRange:
    raw_start = require_field(raw, "start", "K range")
    raw_end = require_field(raw, "end", "K range")
    return KRange(
        start=parse_timestamp(raw_start),
        end=parse_timestamp(raw_end),
        raw_start=raw_start,
        raw_end=raw_end,
    )


def parse_periods(body: Dict[str, Any]) -> Dict[str, list]:
    return {
        "q_rules": [parse_q_rule(r) for r in optional_list(body, "q")],
        "p_rules": [parse_p_rule(r) for r in optional_list(body, "p")],
        "k_ranges": [parse_k_range(r) for r in optional_list(body, "k")],
    }


#Transactions
def parse_expense(raw: Dict[str, Any]) -> Expense:
    key = "timestamp" if isinstance(raw, dict) and "timestamp" in raw else "date"
    return Expense(
        timestamp=require_field(raw, key, "Expense"),
        amount=to_decimal(require_field(raw, "amount", "Expense")),
    )


def parse_transaction(raw: Dict[str, Any], derive_missing: bool = False) -> Transaction:
    """
    Build a :class:`Transaction` from a JSON object.

    With *derive_missing*, absent ``ceiling`` / ``remanent`` fields are
    computed from ``amount`` instead of being rejected.
    """
    amount = to_decimal(require_field(raw, "amount", "Transaction"))
    if derive_missing and "ceiling" not in raw:
        ceiling = compute_ceiling(amount)
    else:
        ceiling = to_decimal(require_field(raw, "ceiling", "Transaction"))
    if derive_missing and "remanent" not in raw:
        remanent = compute_remanent(ceiling, amount)
    else:
        remanent = to_decimal(require_field(raw, "remanent", "Transaction"))
    raw_date = require_field(raw, "date", "Transaction")
    return Transaction(
        date=parse_timestamp(raw_date),
        amount=amount,
        ceiling=ceiling,
        remanent=remanent,
        raw_date=raw_date,
    )
