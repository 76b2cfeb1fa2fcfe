"""
Transaction validator service.

Responsibility: check the internal consistency of an enriched transaction
list and partition it into *valid* / *invalid* / *duplicates* buckets.

Duplicate detection runs first: every occurrence of a date string that
appears more than once goes to *duplicates* and skips the other checks.
Strings are compared verbatim, as supplied, not after parsing.

The remaining rules are all evaluated (not short-circuited) so a single
transaction can report several reasons:

1. ``amount`` > 0.
2. ``ceiling`` equals the computed ceiling of ``amount``.
3. ``remanent`` equals ``ceiling - amount``.
4. ``remanent`` <= ``min(10 % × wage × 12, 200 000)``.

Comparisons in rules 2 and 3 use an absolute tolerance of ``0.001``.
"""

from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal
from typing import List

from microsave.models.schemas import InvalidTransaction, Transaction, ValidationResult
from microsave.utils.financial import (
    ZERO,
    compute_ceiling,
    compute_remanent,
    investment_cap,
    to_decimal,
)

logger = logging.getLogger(__name__)

TOLERANCE = Decimal("0.001")

DUPLICATE_MESSAGE = "Duplicate transaction date"


def _matches(actual: Decimal, expected: Decimal) -> bool:
    return abs(actual - expected) <= TOLERANCE


def check_transaction(txn: Transaction, max_investable: Decimal) -> List[str]:
    """Return every consistency rule *txn* breaks; empty when it is valid."""
    errors: List[str] = []

    if txn.amount <= ZERO:
        errors.append("Transaction amount must be positive")

    expected_ceiling = compute_ceiling(txn.amount)
    if not _matches(txn.ceiling, expected_ceiling):
        errors.append(
            f"Ceiling mismatch: expected {expected_ceiling}, got {txn.ceiling}"
        )

    expected_remanent = compute_remanent(expected_ceiling, txn.amount)
    if not _matches(txn.remanent, expected_remanent):
        errors.append(
            f"Remanent mismatch: expected {expected_remanent}, got {txn.remanent}"
        )

    if txn.remanent > max_investable:
        errors.append(
            f"Remanent {txn.remanent} exceeds maximum allowed {max_investable}"
        )

    return errors


def validate_transactions(
    wage: Decimal,
    transactions: List[Transaction],
) -> ValidationResult:
    """
    Apply all validation rules and return a :class:`~microsave.models.schemas.ValidationResult`.

    Parameters
    ----------
    wage:
        Gross **monthly** income.
    transactions:
        Enriched transaction records (ceiling + remanent already set).

    Returns
    -------
    ValidationResult
        Partitioned *valid*, *invalid* and *duplicates* lists, each in
        input order.
    """
    valid: List[Transaction] = []
    invalid: List[InvalidTransaction] = []
    duplicates: List[InvalidTransaction] = []

    max_investable = investment_cap(to_decimal(wage))
    occurrences = Counter(t.date_key for t in transactions)

    for txn in transactions:
        if occurrences[txn.date_key] > 1:
            duplicates.append(InvalidTransaction(transaction=txn, message=DUPLICATE_MESSAGE))
            continue

        errors = check_transaction(txn, max_investable)
        if errors:
            invalid.append(InvalidTransaction(transaction=txn, message="; ".join(errors)))
        else:
            valid.append(txn)

    logger.debug(
        "Validated %d transactions: %d valid, %d invalid, %d duplicates",
        len(transactions), len(valid), len(invalid), len(duplicates),
    )

    return ValidationResult(valid=valid, invalid=invalid, duplicates=duplicates)
